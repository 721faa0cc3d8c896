"""
Post API routes
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_comments_service, get_pagination, get_posts_service
from models.comment import CommentCreateRequest, CommentResponse
from models.pagination import Pagination
from models.post import PostCreateRequest, PostPatch, PostReplaceRequest, PostResponse
from services.comments_service import CommentsService
from services.posts_service import PostsService
from utils.auth import LOGGED_USER, Principal, authorize

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[PostResponse])
async def list_posts(
    title: Optional[str] = Query(None, min_length=1),
    pagination: Pagination = Depends(get_pagination),
    _: Principal = Depends(authorize(LOGGED_USER)),
    posts_service: PostsService = Depends(get_posts_service)
):
    """List posts, newest first"""
    return await posts_service.list_posts(title=title, pagination=pagination)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: PostCreateRequest,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    posts_service: PostsService = Depends(get_posts_service)
):
    """Create a new post owned by the caller"""
    return await posts_service.create_post(principal, title=request.title, message=request.message)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    _: Principal = Depends(authorize(LOGGED_USER)),
    posts_service: PostsService = Depends(get_posts_service)
):
    return await posts_service.get(post_id)


@router.put("/{post_id}", response_model=PostResponse)
async def replace_post(
    post_id: str,
    request: PostReplaceRequest,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    posts_service: PostsService = Depends(get_posts_service)
):
    """Replace the title and message of a post (creator only)"""
    return await posts_service.replace_post(principal, post_id, title=request.title, message=request.message)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    request: PostPatch,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    posts_service: PostsService = Depends(get_posts_service)
):
    """Update some fields of a post (creator only)"""
    return await posts_service.update(principal, post_id, request.model_dump(exclude_unset=True))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    posts_service: PostsService = Depends(get_posts_service)
):
    """Delete a post together with its comments (creator only)"""
    await posts_service.remove(principal, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments", response_model=List[CommentResponse])
async def list_post_comments(
    post_id: str,
    message: Optional[str] = Query(None, min_length=1),
    pagination: Pagination = Depends(get_pagination),
    _: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    """List the comments of a post, newest first"""
    return await comments_service.list_post_comments(post_id, message=message, pagination=pagination)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    request: CommentCreateRequest,
    principal: Principal = Depends(authorize(LOGGED_USER)),
    comments_service: CommentsService = Depends(get_comments_service)
):
    """Comment on an existing post"""
    return await comments_service.create_comment(principal, post_id, message=request.message)
