"""
Comment API routes
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_comments_service, get_pagination
from models.comment import CommentPatch, CommentReplaceRequest, CommentResponse
from models.pagination import Pagination
from services.comments_service import CommentsService
from utils.auth import LOGGED_USER, Principal, authorize

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[CommentResponse])
async def list_comments(
    message: Optional[str] = Query(None, min_length=1),
    post_id: Optional[str] = Query(None, alias="postId"),
    pagination: Pagination = Depends(get_pagination),
    _: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    """List comments, optionally scoped to one post"""
    return await comments_service.list_comments(message=message, post_id=post_id, pagination=pagination)


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: str,
    _: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    return await comments_service.get(comment_id)


@router.put("/{comment_id}", response_model=CommentResponse)
async def replace_comment(
    comment_id: str,
    request: CommentReplaceRequest,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    return await comments_service.replace_comment(principal, comment_id, message=request.message)


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    request: CommentPatch,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    return await comments_service.update(principal, comment_id, request.model_dump(exclude_unset=True))


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    await comments_service.remove(principal, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
