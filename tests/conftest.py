"""
pytest configuration and fixtures for the blog backend test suite
Services and routes run against an in-memory document store
"""

import copy
import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest

from api.dependencies import Stores, get_stores
from app import create_app
from database.schema import COMMENTS, POSTS, CollectionSpec
from services.comments_service import CommentsService
from services.jwt_service import generate_access_token
from services.posts_service import PostsService
from utils.auth import Principal
from utils.errors import StoreError

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryDocumentStore:
    """Dictionary-backed implementation of the document store contract"""

    def __init__(self, collection: CollectionSpec):
        self.collection = collection
        self.documents: Dict[str, Dict[str, Any]] = {}
        self._clock = itertools.count(1)
        self.fail_on: Dict[str, Exception] = {}
        self.calls: List[str] = []

    def _record(self, operation: str):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def _now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._clock))

    @staticmethod
    def _matches(document: Dict[str, Any], filters: Dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in filters.items())

    async def insert(self, document: Dict[str, Any]) -> str:
        self._record("insert")
        record_id = str(uuid.uuid4())
        now = self._now()
        self.documents[record_id] = {
            **self.collection.defaults,
            **copy.deepcopy(document),
            "id": record_id,
            "created_at": now,
            "updated_at": now,
        }
        return record_id

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        self._record("find_by_id")
        document = self.documents.get(record_id)
        return copy.deepcopy(document) if document else None

    async def find_many(self, filters=None, sort=None, skip=0, limit=100) -> List[Dict[str, Any]]:
        self._record("find_many")
        matched = [d for d in self.documents.values() if self._matches(d, filters or {})]
        for field_name, direction in reversed(list(sort or ())):
            matched.sort(key=lambda d: d[field_name], reverse=direction.lower() == "desc")
        return copy.deepcopy(matched[skip:skip + limit])

    async def update_by_id(self, record_id, fields, override=False, upsert=False):
        self._record("update_by_id")
        document = self.documents.get(record_id)
        if document is None:
            if not upsert:
                return None
            now = self._now()
            document = {**self.collection.defaults, "id": record_id, "created_at": now}
            self.documents[record_id] = document
        if override:
            for field_name in self.collection.replaceable:
                if field_name not in fields:
                    document[field_name] = self.collection.defaults.get(field_name)
        document.update(copy.deepcopy(fields))
        document["updated_at"] = self._now()
        return copy.deepcopy(document)

    async def delete_by_id(self, record_id: str) -> bool:
        self._record("delete_by_id")
        return self.documents.pop(record_id, None) is not None

    async def delete_many(self, filters: Dict[str, Any]) -> int:
        self._record("delete_many")
        if not filters:
            raise ValueError("Refusing to delete every document")
        doomed = [key for key, d in self.documents.items() if self._matches(d, filters)]
        for key in doomed:
            del self.documents[key]
        return len(doomed)

    async def ping(self) -> bool:
        self._record("ping")
        return True


@pytest.fixture
def stores() -> Stores:
    return Stores(posts=InMemoryDocumentStore(POSTS), comments=InMemoryDocumentStore(COMMENTS))


@pytest.fixture
def posts_service(stores) -> PostsService:
    return PostsService(stores.posts, stores.comments)


@pytest.fixture
def comments_service(stores) -> CommentsService:
    return CommentsService(stores.comments, stores.posts)


@pytest.fixture
def alice() -> Principal:
    return Principal(id="user-alice")


@pytest.fixture
def bob() -> Principal:
    return Principal(id="user-bob")


@pytest.fixture
def store_failure():
    return StoreError("connection reset by peer")


@pytest.fixture
def app(stores):
    application = create_app(use_lifespan=False)
    application.dependency_overrides[get_stores] = lambda: stores
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


def auth_headers(user_id: str, role: str = "user") -> Dict[str, str]:
    return {"Authorization": f"Bearer {generate_access_token(user_id, role)}"}


@pytest.fixture
def alice_headers(alice) -> Dict[str, str]:
    return auth_headers(alice.id)


@pytest.fixture
def bob_headers(bob) -> Dict[str, str]:
    return auth_headers(bob.id)
