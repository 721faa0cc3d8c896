"""
Comment-related Pydantic models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.common import reject_blank


class CommentCreateRequest(BaseModel):
    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value):
        return reject_blank(value)


class CommentReplaceRequest(CommentCreateRequest):
    pass


class CommentPatch(BaseModel):
    """Only the message of a comment can change; postId and createdBy are ignored"""
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = Field(None, min_length=1)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value):
        return reject_blank(value)


class CommentResponse(BaseModel):
    id: str
    message: str
    postId: str
    createdBy: str
    updatedBy: str
