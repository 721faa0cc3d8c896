"""
PostgreSQL-backed document store

Each collection lives in its own table. The store exposes the small CRUD
contract the resource services depend on: insert, find_by_id, find_many,
update_by_id, delete_by_id and delete_many. Every asyncpg failure is raised
as StoreError so callers never see driver exceptions.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

import asyncpg

from database.schema import CollectionSpec
from utils.errors import StoreError

logger = logging.getLogger(__name__)

SortSpec = Sequence[Tuple[str, str]]

# Bookkeeping columns the store maintains itself
_MANAGED_COLUMNS = ("id", "created_at", "updated_at")


class DocumentStore:
    """CRUD access to a single collection over an injected asyncpg pool"""

    def __init__(self, pool: asyncpg.Pool, collection: CollectionSpec):
        self.pool = pool
        self.collection = collection

    @property
    def table(self) -> str:
        return self.collection.table

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    async def insert(self, document: Dict[str, Any]) -> str:
        """Insert a document and return its store-assigned id"""
        values = {**self.collection.defaults, **document}
        values = {k: v for k, v in values.items() if k not in _MANAGED_COLUMNS}
        query, params = self._build_insert_query(values)
        row = await self._fetchrow(query, params, write=True)
        if not row:
            raise StoreError(f"Insert into {self.table} returned no row")
        return str(row["id"])

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        query = f"SELECT * FROM {self.table} WHERE id = $1"
        row = await self._fetchrow(query, [self._coerce("id", record_id)])
        return self._row_to_document(row) if row else None

    async def find_many(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Dict[str, Any]]:
        query, params = self._build_read_query(filters or {}, sort or (), skip, limit)
        rows = await self._fetch(query, params)
        return [self._row_to_document(row) for row in rows]

    async def update_by_id(
        self,
        record_id: str,
        fields: Dict[str, Any],
        override: bool = False,
        upsert: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Apply field values to one document

        Args:
            record_id: id of the document to change
            fields: column values to write
            override: reset replaceable fields missing from `fields` to their defaults
            upsert: insert the document under `record_id` when it does not exist

        Returns:
            The document after the write, or None when nothing matched
        """
        fields = {k: v for k, v in fields.items() if k not in _MANAGED_COLUMNS}
        if upsert:
            query, params = self._build_upsert_query(record_id, fields, override)
        else:
            query, params = self._build_update_query(record_id, fields, override)
        row = await self._fetchrow(query, params, write=True)
        return self._row_to_document(row) if row else None

    async def delete_by_id(self, record_id: str) -> bool:
        query = f"DELETE FROM {self.table} WHERE id = $1"
        result = await self._execute(query, [self._coerce("id", record_id)])
        return self._affected_rows(result) > 0

    async def delete_many(self, filters: Dict[str, Any]) -> int:
        if not filters:
            raise ValueError(f"Refusing to delete every document in {self.table}")
        where_sql, params = self._build_where(filters, 1)
        query = f"DELETE FROM {self.table} WHERE {where_sql}"
        result = await self._execute(query, params)
        return self._affected_rows(result)

    async def ping(self) -> bool:
        await self._fetchrow("SELECT 1 AS ok", [])
        return True

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def _check_column(self, name: str) -> str:
        if not self.collection.has_column(name):
            raise ValueError(f"Unknown field for {self.collection.name}: {name}")
        return name

    def _coerce(self, column: str, value: Any) -> Any:
        if column in self.collection.uuid_columns and isinstance(value, str):
            return UUID(value)
        return value

    def _build_where(self, filters: Dict[str, Any], param_counter: int) -> Tuple[str, List[Any]]:
        where_parts = []
        params = []
        for field_name, value in filters.items():
            self._check_column(field_name)
            if value is None:
                where_parts.append(f"{field_name} IS NULL")
                continue
            where_parts.append(f"{field_name} = ${param_counter}")
            params.append(self._coerce(field_name, value))
            param_counter += 1
        return " AND ".join(where_parts), params

    def _build_read_query(
        self,
        filters: Dict[str, Any],
        sort: SortSpec,
        skip: int,
        limit: int
    ) -> Tuple[str, List[Any]]:
        query = f"SELECT * FROM {self.table}"
        params: List[Any] = []

        if filters:
            where_sql, params = self._build_where(filters, 1)
            query += f" WHERE {where_sql}"

        if sort:
            order_parts = []
            for field_name, direction in sort:
                direction = direction.upper()
                if direction not in ("ASC", "DESC"):
                    raise ValueError(f"Invalid sort direction: {direction}")
                order_parts.append(f"{self._check_column(field_name)} {direction}")
            query += f" ORDER BY {', '.join(order_parts)}"

        param_counter = len(params) + 1
        query += f" LIMIT ${param_counter}"
        params.append(limit)

        if skip > 0:
            query += f" OFFSET ${param_counter + 1}"
            params.append(skip)

        return query, params

    def _build_insert_query(self, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
        field_names = [self._check_column(name) for name in values]
        placeholders = [f"${i}" for i in range(1, len(field_names) + 1)]
        params = [self._coerce(name, values[name]) for name in field_names]
        query = (
            f"INSERT INTO {self.table} ({', '.join(field_names)}) "
            f"VALUES ({', '.join(placeholders)}) RETURNING id"
        )
        return query, params

    def _set_clauses(self, fields: Dict[str, Any], override: bool, param_counter: int):
        set_parts = []
        params = []
        for field_name, value in fields.items():
            self._check_column(field_name)
            set_parts.append(f"{field_name} = ${param_counter}")
            params.append(self._coerce(field_name, value))
            param_counter += 1
        if override:
            for field_name in self.collection.replaceable:
                if field_name not in fields:
                    set_parts.append(f"{field_name} = DEFAULT")
        set_parts.append("updated_at = NOW()")
        return set_parts, params, param_counter

    def _build_update_query(
        self,
        record_id: str,
        fields: Dict[str, Any],
        override: bool
    ) -> Tuple[str, List[Any]]:
        set_parts, params, param_counter = self._set_clauses(fields, override, 1)
        query = (
            f"UPDATE {self.table} SET {', '.join(set_parts)} "
            f"WHERE id = ${param_counter} RETURNING *"
        )
        params.append(self._coerce("id", record_id))
        return query, params

    def _build_upsert_query(
        self,
        record_id: str,
        fields: Dict[str, Any],
        override: bool
    ) -> Tuple[str, List[Any]]:
        values = {**self.collection.defaults, **fields}
        field_names = ["id"] + [self._check_column(name) for name in values]
        params = [self._coerce("id", record_id)] + [self._coerce(name, values[name]) for name in values]
        placeholders = [f"${i}" for i in range(1, len(field_names) + 1)]

        update_parts = [f"{name} = EXCLUDED.{name}" for name in fields]
        if override:
            update_parts += [
                f"{name} = DEFAULT" for name in self.collection.replaceable if name not in fields
            ]
        update_parts.append("updated_at = NOW()")

        query = (
            f"INSERT INTO {self.table} ({', '.join(field_names)}) "
            f"VALUES ({', '.join(placeholders)}) "
            f"ON CONFLICT (id) DO UPDATE SET {', '.join(update_parts)} RETURNING *"
        )
        return query, params

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @staticmethod
    def _affected_rows(status: Optional[str]) -> int:
        # asyncpg returns a command tag such as "DELETE 3"
        try:
            return int(status.split()[-1]) if status else 0
        except ValueError:
            return 0

    @staticmethod
    def _row_to_document(row) -> Dict[str, Any]:
        document = dict(row)
        for key, value in document.items():
            if isinstance(value, UUID):
                document[key] = str(value)
            elif hasattr(value, 'isoformat'):
                document[key] = value.isoformat()
        return document

    async def _fetchrow(self, query: str, params: List[Any], write: bool = False):
        logger.debug(f"Executing on {self.table}: {query} params={params}")
        try:
            async with self.pool.acquire() as conn:
                if write:
                    async with conn.transaction():
                        return await conn.fetchrow(query, *params)
                return await conn.fetchrow(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Database error on {self.table}: {e}")
            raise StoreError(f"Database operation on {self.table} failed: {e}") from e

    async def _fetch(self, query: str, params: List[Any]):
        logger.debug(f"Executing on {self.table}: {query} params={params}")
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetch(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Database error on {self.table}: {e}")
            raise StoreError(f"Database query on {self.table} failed: {e}") from e

    async def _execute(self, query: str, params: List[Any]) -> str:
        logger.debug(f"Executing on {self.table}: {query} params={params}")
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    return await conn.execute(query, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Database error on {self.table}: {e}")
            raise StoreError(f"Database write on {self.table} failed: {e}") from e
