"""
Table layout for the posts and comments collections
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class CollectionSpec:
    """Describes how a collection maps onto a table"""
    name: str
    table: str
    columns: Tuple[str, ...]
    # Fields reset to their column default when a document is overridden
    replaceable: Tuple[str, ...] = ()
    uuid_columns: Tuple[str, ...] = ("id",)
    defaults: Dict[str, object] = field(default_factory=dict)

    def has_column(self, name: str) -> bool:
        return name in self.columns


POSTS = CollectionSpec(
    name="posts",
    table="posts",
    columns=(
        "id", "title", "message", "created_by", "updated_by",
        "active", "deleted", "created_at", "updated_at",
    ),
    replaceable=("title", "message"),
    defaults={"active": True, "deleted": False},
)

COMMENTS = CollectionSpec(
    name="comments",
    table="comments",
    columns=(
        "id", "message", "post_id", "created_by", "updated_by",
        "active", "deleted", "created_at", "updated_at",
    ),
    replaceable=("message",),
    uuid_columns=("id", "post_id"),
    defaults={"active": True, "deleted": False},
)

SCHEMA_STATEMENTS = (
    "CREATE EXTENSION IF NOT EXISTS pgcrypto",
    """
    CREATE TABLE IF NOT EXISTS posts (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        title TEXT NOT NULL,
        message TEXT,
        created_by TEXT NOT NULL,
        updated_by TEXT NOT NULL,
        active BOOLEAN NOT NULL DEFAULT TRUE,
        deleted BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS posts_title_idx ON posts (title)",
    "CREATE INDEX IF NOT EXISTS posts_created_at_idx ON posts (created_at DESC)",
    """
    CREATE TABLE IF NOT EXISTS comments (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        message TEXT NOT NULL,
        post_id UUID NOT NULL REFERENCES posts (id),
        created_by TEXT NOT NULL,
        updated_by TEXT NOT NULL,
        active BOOLEAN NOT NULL DEFAULT TRUE,
        deleted BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS comments_post_id_idx ON comments (post_id)",
    "CREATE INDEX IF NOT EXISTS comments_message_idx ON comments (message)",
)
