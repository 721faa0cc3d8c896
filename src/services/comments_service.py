"""
Comments service - business logic for comments scoped to a post
"""

import logging
from typing import Any, Dict, List, Optional

from database.document_store import DocumentStore
from models.pagination import Pagination
from services.base_service import BaseService
from services.transform import transform_comment
from utils.errors import NotFoundError
from utils.helpers import normalize_record_id

logger = logging.getLogger(__name__)


class CommentsService(BaseService):
    """Service for comment operations"""

    required_fields = ("message",)

    def __init__(self, comments_store: DocumentStore, posts_store: DocumentStore):
        super().__init__("comment", comments_store, transform_comment)
        self.posts_store = posts_store

    async def load_post(self, post_id: Any) -> Dict[str, Any]:
        """Fetch the parent post, raising NotFoundError when it is missing"""
        normalized = normalize_record_id(post_id)
        post = await self.posts_store.find_by_id(normalized) if normalized else None
        if not post or post.get("deleted"):
            raise NotFoundError("Post does not exist")
        return post

    async def list_comments(
        self,
        message: Optional[str] = None,
        post_id: Optional[Any] = None,
        pagination: Optional[Pagination] = None
    ) -> List[Dict[str, Any]]:
        """
        List comments, newest first

        Args:
            message: Exact message to match (optional)
            post_id: Restrict to the comments of this post (optional)
            pagination: Page and page size (defaults to the first page)

        Returns:
            Transformed comments for the requested page
        """
        filters = {}
        if message is not None:
            filters["message"] = message
        if post_id is not None:
            normalized = normalize_record_id(post_id)
            if normalized is None:
                # A malformed post id cannot own any comment
                return []
            filters["post_id"] = normalized
        return await self._list(filters, pagination or Pagination())

    async def list_post_comments(
        self,
        post_id: Any,
        message: Optional[str] = None,
        pagination: Optional[Pagination] = None
    ) -> List[Dict[str, Any]]:
        post = await self.load_post(post_id)
        return await self.list_comments(message=message, post_id=post["id"], pagination=pagination)

    async def create_comment(self, principal: Any, post_id: Any, message: str) -> Dict[str, Any]:
        """Create a comment under an existing post"""
        post = await self.load_post(post_id)
        return await self._create(principal, {"message": message, "post_id": post["id"]})

    async def replace_comment(self, principal: Any, comment_id: Any, message: str) -> Dict[str, Any]:
        return await self.replace(principal, comment_id, {"message": message})
