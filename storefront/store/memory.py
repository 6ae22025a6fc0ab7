from __future__ import annotations

import copy
import uuid
from collections.abc import Sequence
from typing import Any

from .base import (
    BatchCommitError,
    Document,
    DocumentNotFoundError,
    Filter,
    OrderBy,
    StoreError,
    apply_update,
    matches_filters,
    sort_documents,
)

"""In-memory Catalog Store.

Used by the test suite and by ``--store memory`` dry runs. Documents are deep
copied on the way in and out so callers can never mutate stored state by
accident, and batch commits are applied to a working copy that only replaces
the live collections once every queued operation has succeeded.
"""

__all__ = [
    "MemoryCatalogStore",
    "MemoryWriteBatch",
]


class MemoryWriteBatch:
    """Queued update/delete operations applied all-or-nothing on commit()."""

    def __init__(self, store: MemoryCatalogStore) -> None:
        self._store = store
        self._ops: list[tuple[str, str, str, dict[str, Any] | None]] = []
        self._committed = False

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        self._ops.append(("update", collection, doc_id, copy.deepcopy(partial)))

    def delete(self, collection: str, doc_id: str) -> None:
        self._ops.append(("delete", collection, doc_id, None))

    def __len__(self) -> int:
        return len(self._ops)

    def commit(self) -> None:
        if self._committed:
            raise BatchCommitError("batch already committed")
        self._store._apply_batch(self._ops)
        self._committed = True


class MemoryCatalogStore:
    def __init__(self, seed: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(seed) if seed else {}

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def list(
        self,
        collection: str,
        filters: Sequence[Filter] | None = None,
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        docs = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collections.get(collection, {}).items()
            if matches_filters(data, filters)
        ]
        docs = sort_documents(docs, order_by)
        if limit is not None:
            docs = docs[:limit]
        return docs

    def create(self, collection: str, record: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(record)
        return doc_id

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None:
        doc = self._collections.get(collection, {}).get(doc_id)
        if doc is None:
            raise DocumentNotFoundError(collection, doc_id)
        apply_update(doc, copy.deepcopy(partial))

    def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)

    def batch(self) -> MemoryWriteBatch:
        return MemoryWriteBatch(self)

    def close(self) -> None:
        pass

    def _apply_batch(self, ops: list[tuple[str, str, str, dict[str, Any] | None]]) -> None:
        working = copy.deepcopy(self._collections)
        for kind, collection, doc_id, partial in ops:
            docs = working.setdefault(collection, {})
            if kind == "update":
                if doc_id not in docs:
                    raise BatchCommitError(f"no document to update: {collection}/{doc_id}")
                apply_update(docs[doc_id], partial or {})
            elif kind == "delete":
                docs.pop(doc_id, None)
            else:  # pragma: no cover
                raise StoreError(f"unknown batch operation: {kind}")
        self._collections = working
