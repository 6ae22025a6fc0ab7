from __future__ import annotations

import logging
import re
from typing import Any

from ..models.catalog import Category
from ..store.base import CATEGORIES, PRODUCTS, CatalogStore, utc_now_iso

"""Category operations and referential consistency rules.

Deleting a category is guarded by its cached ``product_count``:

- ``delete_category`` refuses while the count is above zero and touches
  nothing when it refuses;
- ``force_delete_category_with_reassignment`` rewrites every product that
  points at the category (to a replacement id, or to no category at all) and
  deletes the category in ONE store batch, so either all of it lands or none;
- ``update_category_product_count`` / ``update_all_category_product_counts``
  recompute the cached count by scanning products. Product writes do not
  maintain the count, so it can be stale until one of these runs.
"""

__all__ = [
    "CategoryError",
    "CategoryNotFoundError",
    "CategoryInUseError",
    "CategoryValidationError",
    "get_all_categories",
    "get_featured_categories",
    "get_category_by_id",
    "get_category_by_slug",
    "create_category",
    "update_category",
    "delete_category",
    "force_delete_category_with_reassignment",
    "update_category_product_count",
    "update_all_category_product_counts",
    "generate_category_slug",
    "validate_category_data",
]

logger = logging.getLogger(__name__)

_SLUG_CHARS = re.compile(r"^[a-z0-9-]+$")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


class CategoryError(Exception):
    """Base class for category rule violations."""


class CategoryNotFoundError(CategoryError):
    def __init__(self, category_id: str) -> None:
        super().__init__(f"Category not found: {category_id}")
        self.category_id = category_id


class CategoryInUseError(CategoryError):
    """Raised when a category still has products attached."""

    def __init__(self, category_id: str, product_count: int) -> None:
        super().__init__(
            f"Cannot delete category with {product_count} products. "
            "Please reassign or delete products first."
        )
        self.category_id = category_id
        self.product_count = product_count


class CategoryValidationError(CategoryError):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


# --- queries -----------------------------------------------------------------


def get_all_categories(store: CatalogStore) -> list[Category]:
    docs = store.list(CATEGORIES, order_by=("order", "asc"))
    return [Category.from_document(d.id, d.data) for d in docs]


def get_featured_categories(store: CatalogStore) -> list[Category]:
    docs = store.list(CATEGORIES, filters=[("featured", True)], order_by=("order", "asc"))
    return [Category.from_document(d.id, d.data) for d in docs]


def get_category_by_id(store: CatalogStore, category_id: str) -> Category | None:
    doc = store.get(CATEGORIES, category_id)
    return Category.from_document(category_id, doc) if doc is not None else None


def get_category_by_slug(store: CatalogStore, slug: str) -> Category | None:
    docs = store.list(CATEGORIES, filters=[("slug", slug)], limit=1)
    return Category.from_document(docs[0].id, docs[0].data) if docs else None


# --- validation ----------------------------------------------------------------


def generate_category_slug(name: str) -> str:
    return _NON_SLUG.sub("-", name.lower().strip()).strip("-")


def validate_category_data(data: dict[str, Any]) -> list[str]:
    """Check the fields present in ``data``; absent keys are not checked.

    Returns the list of problems (empty when valid).
    """
    errors: list[str] = []

    if "name" in data:
        name = data["name"] or ""
        if not name.strip():
            errors.append("Category name is required")
        if len(name) > 100:
            errors.append("Category name must be less than 100 characters")

    if "slug" in data:
        slug = data["slug"] or ""
        if not slug.strip():
            errors.append("Category slug is required")
        if not _SLUG_CHARS.match(slug):
            errors.append("Category slug must contain only lowercase letters, numbers, and hyphens")

    if "description" in data and len(data["description"] or "") > 500:
        errors.append("Description must be less than 500 characters")

    if "order" in data and data["order"] is not None and not 0 <= data["order"] <= 1000:
        errors.append("Order must be between 0 and 1000")

    return errors


# --- mutations -------------------------------------------------------------------


def create_category(store: CatalogStore, data: dict[str, Any]) -> str:
    """Create a category with ``product_count`` 0. Slugs must be unique."""
    errors = validate_category_data(data)
    if errors:
        raise CategoryValidationError(errors)
    if get_category_by_slug(store, data["slug"]) is not None:
        raise CategoryError(f'Category with slug "{data["slug"]}" already exists')

    now = utc_now_iso()
    doc = {k: v for k, v in data.items() if k != "product_count"}
    doc.update(product_count=0, created_at=now, updated_at=now)
    category_id = store.create(CATEGORIES, doc)
    logger.info(f"created category {category_id} ({data['slug']})")
    return category_id


def update_category(store: CatalogStore, category_id: str, data: dict[str, Any]) -> None:
    """Update editable fields. ``product_count`` is never written here."""
    errors = validate_category_data(data)
    if errors:
        raise CategoryValidationError(errors)
    slug = data.get("slug")
    if slug:
        existing = get_category_by_slug(store, slug)
        if existing is not None and existing.id != category_id:
            raise CategoryError(f'Category with slug "{slug}" already exists')

    partial = {k: v for k, v in data.items() if k not in ("id", "product_count", "created_at")}
    partial["updated_at"] = utc_now_iso()
    store.update(CATEGORIES, category_id, partial)


def delete_category(store: CatalogStore, category_id: str) -> None:
    """Delete a category that has no products.

    Raises
    ------
    CategoryNotFoundError: no such category
    CategoryInUseError: cached product_count is above zero; nothing is changed
    """
    category = get_category_by_id(store, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    if category.product_count > 0:
        raise CategoryInUseError(category_id, category.product_count)
    store.delete(CATEGORIES, category_id)
    logger.info(f"deleted category {category_id}")


def force_delete_category_with_reassignment(
    store: CatalogStore, category_id: str, reassign_to: str | None = None
) -> int:
    """Delete a category and fix up every product that references it, atomically.

    Products are moved to ``reassign_to`` when given; otherwise their
    ``category_id`` and the denormalized ``category_name`` / ``category_slug``
    are cleared to None. The product updates and the category delete are one
    batch: a failed commit (``BatchCommitError``) leaves everything as it was.

    Raises CategoryError when ``reassign_to`` is the category being deleted,
    and CategoryNotFoundError when it does not exist.

    Returns the number of products rewritten.
    """
    if reassign_to == category_id:
        raise CategoryError("Cannot reassign products to the category being deleted")
    if reassign_to and get_category_by_id(store, reassign_to) is None:
        raise CategoryNotFoundError(reassign_to)

    products = store.list(PRODUCTS, filters=[("category_id", category_id)])
    now = utc_now_iso()

    batch = store.batch()
    for product in products:
        if reassign_to:
            batch.update(PRODUCTS, product.id, {"category_id": reassign_to, "updated_at": now})
        else:
            batch.update(
                PRODUCTS,
                product.id,
                {"category_id": None, "category_name": None, "category_slug": None, "updated_at": now},
            )
    batch.delete(CATEGORIES, category_id)
    batch.commit()

    target = reassign_to or "no category"
    logger.info(f"force-deleted category {category_id}; {len(products)} products moved to {target}")
    return len(products)


def update_category_product_count(store: CatalogStore, category_id: str) -> int:
    """Recount products in one category and overwrite the cached count."""
    count = len(store.list(PRODUCTS, filters=[("category_id", category_id)]))
    store.update(CATEGORIES, category_id, {"product_count": count, "updated_at": utc_now_iso()})
    return count


def update_all_category_product_counts(store: CatalogStore) -> dict[str, int]:
    """Refresh every category's count, e.g. after a bulk import."""
    counts: dict[str, int] = {}
    for category in get_all_categories(store):
        counts[category.id] = update_category_product_count(store, category.id)
    logger.info(f"refreshed product counts for {len(counts)} categories")
    return counts
