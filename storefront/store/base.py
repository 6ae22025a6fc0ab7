from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Protocol

"""Catalog Store interface.

The store is a document database: named collections of JSON-like documents
addressed by string id. Services receive a store instance explicitly and
never reach for a global client, so tests can hand them a MemoryCatalogStore.

Filters are ``(field, value)`` equality pairs; a dotted field name reaches
into nested maps (``"seo.slug"``). ``order_by`` is ``(field, "asc"|"desc")``.
Subcollections are ordinary collection names such as ``"products/<id>/prices"``.
"""

__all__ = [
    "StoreError",
    "DocumentNotFoundError",
    "BatchCommitError",
    "Document",
    "Filter",
    "OrderBy",
    "WriteBatch",
    "CatalogStore",
    "PRODUCTS",
    "CATEGORIES",
    "prices_collection",
    "get_path",
    "is_missing",
    "matches_filters",
    "sort_documents",
    "apply_update",
    "utc_now_iso",
]

PRODUCTS = "products"
CATEGORIES = "categories"

Filter = tuple[str, Any]
OrderBy = tuple[str, str]

_MISSING = object()


class StoreError(Exception):
    """Base class for Catalog Store failures."""


class DocumentNotFoundError(StoreError):
    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"no document to update: {collection}/{doc_id}")
        self.collection = collection
        self.doc_id = doc_id


class BatchCommitError(StoreError):
    """Raised when an atomic batch could not be applied. Nothing was written."""


@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any]


class WriteBatch(Protocol):
    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None: ...

    def delete(self, collection: str, doc_id: str) -> None: ...

    def commit(self) -> None: ...


class CatalogStore(Protocol):
    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    def list(
        self,
        collection: str,
        filters: Sequence[Filter] | None = None,
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Document]: ...

    def create(self, collection: str, record: dict[str, Any]) -> str: ...

    def update(self, collection: str, doc_id: str, partial: dict[str, Any]) -> None: ...

    def delete(self, collection: str, doc_id: str) -> None: ...

    def batch(self) -> WriteBatch: ...

    def close(self) -> None: ...


def prices_collection(product_id: str) -> str:
    return f"{PRODUCTS}/{product_id}/prices"


def get_path(doc: dict[str, Any], dotted: str) -> Any:
    """Return the value at a dotted path, or the module's missing sentinel."""
    cur: Any = doc
    for part in dotted.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return _MISSING
        cur = cur[part]
    return cur


def is_missing(value: Any) -> bool:
    return value is _MISSING


def matches_filters(doc: dict[str, Any], filters: Sequence[Filter] | None) -> bool:
    if not filters:
        return True
    for field_name, expected in filters:
        value = get_path(doc, field_name)
        if value is _MISSING or value != expected:
            return False
    return True


def apply_update(doc: dict[str, Any], partial: dict[str, Any]) -> None:
    """Merge ``partial`` into ``doc`` in place. Dotted keys set nested values."""
    for key, value in partial.items():
        parts = key.split(".")
        target = doc
        for part in parts[:-1]:
            nxt = target.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                target[part] = nxt
            target = nxt
        target[parts[-1]] = value


def sort_documents(docs: list[Document], order_by: OrderBy | None) -> list[Document]:
    if order_by is None:
        return docs
    field_name, direction = order_by
    if direction not in ("asc", "desc"):
        raise StoreError(f"invalid order direction: {direction}")

    def key(d: Document) -> tuple[bool, Any]:
        value = get_path(d.data, field_name)
        # missing / null sort first ascending, like the hosted store
        if value is _MISSING or value is None:
            return (False, 0)
        return (True, value)

    return sorted(docs, key=key, reverse=(direction == "desc"))


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")
