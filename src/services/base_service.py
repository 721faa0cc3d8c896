"""
Base service layer shared by the post and comment resources
"""

import logging
from typing import Any, Callable, Dict, List, Mapping

from database.document_store import DocumentStore
from models.pagination import Pagination
from services.ownership import ensure_owner
from utils.errors import NotFoundError
from utils.helpers import normalize_record_id

logger = logging.getLogger(__name__)

# Newest first for every list endpoint, ties broken by id
DEFAULT_SORT = (("created_at", "desc"), ("id", "desc"))


class BaseService:
    """Ownership-checked CRUD over one collection of an injected document store"""

    # Fields that must never be cleared by a partial update
    required_fields: tuple = ()

    def __init__(
        self,
        resource_name: str,
        store: DocumentStore,
        transform: Callable[[Mapping[str, Any]], Dict[str, Any]]
    ):
        self.resource_name = resource_name
        self.store = store
        self.transform = transform

    async def load(self, record_id: Any) -> Dict[str, Any]:
        """
        Fetch the stored document for an id

        Args:
            record_id: Identifier as received from the caller

        Returns:
            The internal document

        Raises:
            NotFoundError: malformed id, no such document, or soft-deleted document
        """
        normalized = normalize_record_id(record_id)
        if normalized is None:
            raise NotFoundError(f"{self.resource_name.capitalize()} does not exist")

        document = await self.store.find_by_id(normalized)
        if not document or document.get("deleted"):
            raise NotFoundError(f"{self.resource_name.capitalize()} does not exist")
        return document

    async def get(self, record_id: Any) -> Dict[str, Any]:
        return self.transform(await self.load(record_id))

    async def _list(self, filters: Dict[str, Any], pagination: Pagination) -> List[Dict[str, Any]]:
        filters = {**filters, "deleted": False}
        documents = await self.store.find_many(
            filters=filters,
            sort=DEFAULT_SORT,
            skip=pagination.offset,
            limit=pagination.limit
        )
        return [self.transform(document) for document in documents]

    async def _create(self, principal: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        document = {
            **fields,
            "created_by": str(principal.id),
            "updated_by": str(principal.id),
        }
        record_id = await self.store.insert(document)
        logger.info(f"Created {self.resource_name} {record_id} by {principal.id}")

        saved = await self.store.find_by_id(record_id)
        if not saved:
            raise NotFoundError(f"{self.resource_name.capitalize()} does not exist")
        return self.transform(saved)

    async def _write(
        self,
        principal: Any,
        record_id: Any,
        fields: Dict[str, Any],
        override: bool
    ) -> Dict[str, Any]:
        existing = await self.load(record_id)
        ensure_owner(principal, existing, self.resource_name)

        # Only replaceable fields are written; everything else on the document is fixed
        writable = self.store.collection.replaceable
        fields = {k: v for k, v in fields.items() if k in writable}
        fields["updated_by"] = str(principal.id)

        saved = await self.store.update_by_id(existing["id"], fields, override=override)
        if not saved:
            # Removed between the load and the write
            raise NotFoundError(f"{self.resource_name.capitalize()} does not exist")

        logger.info(
            f"{'Replaced' if override else 'Updated'} {self.resource_name} {existing['id']} by {principal.id}"
        )
        return self.transform(saved)

    async def replace(self, principal: Any, record_id: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite every replaceable field; fields missing from `fields` go back to defaults"""
        return await self._write(principal, record_id, fields, override=True)

    async def update(self, principal: Any, record_id: Any, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Merge the given patch onto the existing document"""
        patch = {
            k: v for k, v in patch.items()
            if not (k in self.required_fields and v is None)
        }
        return await self._write(principal, record_id, patch, override=False)

    async def _delete(self, document: Mapping[str, Any]) -> None:
        deleted = await self.store.delete_by_id(document["id"])
        if not deleted:
            raise NotFoundError(f"{self.resource_name.capitalize()} does not exist")
        logger.info(f"Deleted {self.resource_name} {document['id']}")

    async def remove(self, principal: Any, record_id: Any) -> None:
        existing = await self.load(record_id)
        ensure_owner(principal, existing, self.resource_name)
        await self._delete(existing)
