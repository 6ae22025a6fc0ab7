from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

import psycopg2
from psycopg2.extras import Json

from .base import (
    BatchCommitError,
    Document,
    DocumentNotFoundError,
    Filter,
    OrderBy,
    StoreError,
    apply_update,
)

"""PostgreSQL-backed Catalog Store.

Every collection lives in a single JSONB documents table keyed by
(collection, id). Equality filters are expressed as JSONB containment so
nested paths (``seo.slug``) and booleans/nulls compare with their JSON types.

Each single-document call is its own transaction. A WriteBatch runs all of
its queued operations inside one transaction and rolls back on the first
failure, which gives the forced category delete its all-or-nothing guarantee.
"""

__all__ = [
    "PostgresCatalogStore",
    "PostgresWriteBatch",
    "validate_table_name",
]


def validate_table_name(table: str) -> str:
    # identifiers are interpolated into SQL, so only alnum + underscore
    if not table or not table.replace("_", "").isalnum():
        raise StoreError(f"invalid table name: {table!r}")
    return table


def _containment(filters: Sequence[Filter]) -> dict[str, Any]:
    """Turn ``[("seo.slug", "x"), ("featured", True)]`` into a nested JSON doc."""
    doc: dict[str, Any] = {}
    for field_name, value in filters:
        parts = field_name.split(".")
        target = doc
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value
    return doc


class PostgresWriteBatch:
    def __init__(self, store: PostgresCatalogStore) -> None:
        self._store = store
        self._ops: list[tuple[str, str, str, dict[str, Any] | None]] = []
        self._committed = False

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        self._ops.append(("update", collection, doc_id, dict(partial)))

    def delete(self, collection: str, doc_id: str) -> None:
        self._ops.append(("delete", collection, doc_id, None))

    def __len__(self) -> int:
        return len(self._ops)

    def commit(self) -> None:
        if self._committed:
            raise BatchCommitError("batch already committed")
        conn = self._store.connection
        try:
            with conn.cursor() as cur:
                for kind, collection, doc_id, partial in self._ops:
                    if kind == "update":
                        self._store._update_in_tx(cur, collection, doc_id, partial or {})
                    else:
                        self._store._delete_in_tx(cur, collection, doc_id)
            conn.commit()
        except (psycopg2.Error, StoreError) as e:
            conn.rollback()
            raise BatchCommitError(f"batch commit failed: {e}") from e
        self._committed = True


class PostgresCatalogStore:
    def __init__(self, connection: Any, table: str = "catalog_documents") -> None:
        self.connection = connection
        self.table = validate_table_name(table)

    def ensure_schema(self) -> None:
        sql = (
            f"CREATE TABLE IF NOT EXISTS {self.table} ("
            "collection text NOT NULL, "
            "id text NOT NULL, "
            "data jsonb NOT NULL, "
            "PRIMARY KEY (collection, id))"
        )
        self._run(lambda cur: cur.execute(sql))

    def _run(self, fn: Any) -> Any:
        try:
            with self.connection.cursor() as cur:
                result = fn(cur)
            self.connection.commit()
            return result
        except psycopg2.Error as e:
            self.connection.rollback()
            raise StoreError(str(e)) from e
        except StoreError:
            self.connection.rollback()
            raise

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        def fn(cur: Any) -> dict[str, Any] | None:
            cur.execute(
                f"SELECT data FROM {self.table} WHERE collection = %s AND id = %s",
                (collection, doc_id),
            )
            row = cur.fetchone()
            return row[0] if row else None

        return self._run(fn)

    def list(
        self,
        collection: str,
        filters: Sequence[Filter] | None = None,
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        sql = f"SELECT id, data FROM {self.table} WHERE collection = %s"
        params: list[Any] = [collection]
        if filters:
            sql += " AND data @> %s"
            params.append(Json(_containment(filters)))
        if order_by is not None:
            field_name, direction = order_by
            if direction not in ("asc", "desc"):
                raise StoreError(f"invalid order direction: {direction}")
            # missing values sort lowest, as in the memory store
            nulls = "FIRST" if direction == "asc" else "LAST"
            sql += f" ORDER BY data #> %s {direction.upper()} NULLS {nulls}"
            params.append(field_name.split("."))
        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)

        def fn(cur: Any) -> list[Document]:
            cur.execute(sql, params)
            return [Document(id=r[0], data=r[1]) for r in cur.fetchall()]

        return self._run(fn)

    def create(self, collection: str, record: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex

        def fn(cur: Any) -> None:
            cur.execute(
                f"INSERT INTO {self.table} (collection, id, data) VALUES (%s, %s, %s)",
                (collection, doc_id, Json(record)),
            )

        self._run(fn)
        return doc_id

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        self._run(lambda cur: self._update_in_tx(cur, collection, doc_id, partial))

    def delete(self, collection: str, doc_id: str) -> None:
        self._run(lambda cur: self._delete_in_tx(cur, collection, doc_id))

    def batch(self) -> PostgresWriteBatch:
        return PostgresWriteBatch(self)

    def close(self) -> None:
        if not self.connection.closed:
            self.connection.close()

    def _update_in_tx(self, cur: Any, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        cur.execute(
            f"SELECT data FROM {self.table} WHERE collection = %s AND id = %s FOR UPDATE",
            (collection, doc_id),
        )
        row = cur.fetchone()
        if row is None:
            raise DocumentNotFoundError(collection, doc_id)
        data = row[0]
        apply_update(data, partial)
        cur.execute(
            f"UPDATE {self.table} SET data = %s WHERE collection = %s AND id = %s",
            (Json(data), collection, doc_id),
        )

    def _delete_in_tx(self, cur: Any, collection: str, doc_id: str) -> None:
        cur.execute(
            f"DELETE FROM {self.table} WHERE collection = %s AND id = %s",
            (collection, doc_id),
        )
