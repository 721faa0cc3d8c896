"""
FastAPI dependencies wiring the document stores and services per request
"""

from dataclasses import dataclass

from fastapi import Depends, Query, Request

from config.settings import DEFAULT_PER_PAGE, MAX_PER_PAGE
from database.document_store import DocumentStore
from database.schema import COMMENTS, POSTS
from models.pagination import Pagination
from services.comments_service import CommentsService
from services.posts_service import PostsService


@dataclass
class Stores:
    """Document stores for every collection the API touches"""
    posts: DocumentStore
    comments: DocumentStore


def get_stores(request: Request) -> Stores:
    """Build stores over the pool opened by the application lifespan"""
    pool = request.app.state.db_pool
    return Stores(
        posts=DocumentStore(pool, POSTS),
        comments=DocumentStore(pool, COMMENTS),
    )


def get_posts_service(stores: Stores = Depends(get_stores)) -> PostsService:
    return PostsService(stores.posts, stores.comments)


def get_comments_service(stores: Stores = Depends(get_stores)) -> CommentsService:
    return CommentsService(stores.comments, stores.posts)


def get_pagination(
    page: int = Query(1, ge=1, description="List page"),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, alias="perPage", description="Entries per page")
) -> Pagination:
    return Pagination(page=page, per_page=per_page)
