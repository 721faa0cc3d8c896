"""
Post-related Pydantic models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.common import reject_blank


class PostCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    message: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return reject_blank(value)


class PostReplaceRequest(PostCreateRequest):
    """Full replacement of the mutable post fields; an omitted message is cleared"""


class PostPatch(BaseModel):
    """Fields a partial post update may touch; anything else in the body is dropped"""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(None, min_length=1)
    message: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return reject_blank(value)


class PostResponse(BaseModel):
    id: str
    title: str
    message: Optional[str] = None
    createdBy: str
    updatedBy: str
