"""
Posts service - business logic for post management
"""

import logging
from typing import Any, Dict, List, Optional

from database.document_store import DocumentStore
from models.pagination import Pagination
from services.base_service import BaseService
from services.ownership import ensure_owner
from services.transform import transform_post

logger = logging.getLogger(__name__)


class PostsService(BaseService):
    """Service for post operations, including the comment cascade on removal"""

    required_fields = ("title",)

    def __init__(self, posts_store: DocumentStore, comments_store: DocumentStore):
        super().__init__("post", posts_store, transform_post)
        self.comments_store = comments_store

    async def list_posts(
        self,
        title: Optional[str] = None,
        pagination: Optional[Pagination] = None
    ) -> List[Dict[str, Any]]:
        """
        List posts, newest first

        Args:
            title: Exact title to match (optional)
            pagination: Page and page size (defaults to the first page)

        Returns:
            Transformed posts for the requested page
        """
        filters = {}
        if title is not None:
            filters["title"] = title
        return await self._list(filters, pagination or Pagination())

    async def create_post(self, principal: Any, title: str, message: Optional[str] = None) -> Dict[str, Any]:
        return await self._create(principal, {"title": title, "message": message})

    async def replace_post(
        self,
        principal: Any,
        post_id: Any,
        title: str,
        message: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.replace(principal, post_id, {"title": title, "message": message})

    async def remove(self, principal: Any, record_id: Any) -> None:
        """
        Delete a post and every comment attached to it

        Comments go first. A failing cascade raises StoreError before the post
        delete is attempted, so no comment is ever left without its post.
        """
        post = await self.load(record_id)
        ensure_owner(principal, post, self.resource_name)

        removed = await self.comments_store.delete_many({"post_id": post["id"]})
        logger.info(f"Cascade removed {removed} comments of post {post['id']}")

        await self._delete(post)
