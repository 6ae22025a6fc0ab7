from __future__ import annotations

import pytest

from storefront.services.categories import (
    CategoryError,
    CategoryInUseError,
    CategoryNotFoundError,
    CategoryValidationError,
    create_category,
    delete_category,
    force_delete_category_with_reassignment,
    generate_category_slug,
    get_all_categories,
    get_category_by_id,
    get_category_by_slug,
    get_featured_categories,
    update_all_category_product_counts,
    update_category,
    update_category_product_count,
    validate_category_data,
)
from storefront.store.base import BatchCommitError, Document
from storefront.store.memory import MemoryCatalogStore


class GhostProductStore(MemoryCatalogStore):
    """Lists one extra product that does not exist, so a batch update on it fails."""

    def list(self, collection, filters=None, order_by=None, limit=None):
        docs = super().list(collection, filters=filters, order_by=order_by, limit=limit)
        if collection == "products":
            docs.append(Document(id="ghost", data={"category_id": "cat-phones"}))
        return docs


def test_delete_blocked_while_products_attached(seeded_store):
    with pytest.raises(CategoryInUseError) as exc:
        delete_category(seeded_store, "cat-phones")
    assert exc.value.product_count == 3
    assert "3" in str(exc.value)
    assert str(exc.value) == (
        "Cannot delete category with 3 products. Please reassign or delete products first."
    )
    # nothing changed
    assert seeded_store.get("categories", "cat-phones") is not None
    assert seeded_store.get("products", "p1")["category_id"] == "cat-phones"


def test_delete_empty_category(seeded_store):
    delete_category(seeded_store, "cat-laptops")
    assert get_category_by_id(seeded_store, "cat-laptops") is None


def test_delete_missing_category(seeded_store):
    with pytest.raises(CategoryNotFoundError):
        delete_category(seeded_store, "nope")


def test_delete_uses_cached_count(seeded_store):
    # stale count of 0 lets the delete through even though p4 points here
    seeded_store.update("categories", "cat-audio", {"product_count": 0})
    delete_category(seeded_store, "cat-audio")
    assert seeded_store.get("products", "p4")["category_id"] == "cat-audio"


def test_force_delete_clears_category_fields(seeded_store):
    moved = force_delete_category_with_reassignment(seeded_store, "cat-phones")
    assert moved == 3
    assert seeded_store.get("categories", "cat-phones") is None
    for pid in ("p1", "p2", "p3"):
        doc = seeded_store.get("products", pid)
        assert doc["category_id"] is None
        assert doc["category_name"] is None
        assert doc["category_slug"] is None
    assert seeded_store.get("products", "p4")["category_id"] == "cat-audio"


def test_force_delete_reassigns(seeded_store):
    moved = force_delete_category_with_reassignment(seeded_store, "cat-phones", reassign_to="cat-laptops")
    assert moved == 3
    assert {d.id for d in seeded_store.list("products", filters=[("category_id", "cat-laptops")])} == {
        "p1", "p2", "p3",
    }
    assert seeded_store.get("categories", "cat-phones") is None


def test_force_delete_is_atomic(catalog_seed):
    store = GhostProductStore(seed=catalog_seed)
    with pytest.raises(BatchCommitError):
        force_delete_category_with_reassignment(store, "cat-phones")
    assert store.get("categories", "cat-phones") is not None
    assert all(store.get("products", pid)["category_id"] == "cat-phones" for pid in ("p1", "p2", "p3"))


def test_force_delete_missing_category_is_noop(seeded_store):
    assert force_delete_category_with_reassignment(seeded_store, "nope") == 0
    assert len(seeded_store.list("categories")) == 3


def test_force_delete_rejects_reassign_to_self(seeded_store):
    with pytest.raises(CategoryError, match="category being deleted"):
        force_delete_category_with_reassignment(seeded_store, "cat-phones", reassign_to="cat-phones")
    assert seeded_store.get("categories", "cat-phones") is not None
    assert all(seeded_store.get("products", pid)["category_id"] == "cat-phones" for pid in ("p1", "p2", "p3"))


def test_force_delete_rejects_missing_reassign_target(seeded_store):
    with pytest.raises(CategoryNotFoundError, match="Category not found: cat-gone"):
        force_delete_category_with_reassignment(seeded_store, "cat-phones", reassign_to="cat-gone")
    assert seeded_store.get("categories", "cat-phones") is not None
    assert seeded_store.get("products", "p1")["category_id"] == "cat-phones"


def test_refresh_single_count(seeded_store):
    seeded_store.update("categories", "cat-phones", {"product_count": 99})
    assert update_category_product_count(seeded_store, "cat-phones") == 3
    assert get_category_by_id(seeded_store, "cat-phones").product_count == 3


def test_refresh_all_counts(seeded_store):
    seeded_store.create("products", {"title": "ThinkPad", "category_id": "cat-laptops"})
    counts = update_all_category_product_counts(seeded_store)
    assert counts == {"cat-phones": 3, "cat-laptops": 1, "cat-audio": 1}
    assert get_category_by_id(seeded_store, "cat-laptops").product_count == 1


def test_queries(seeded_store):
    assert [c.id for c in get_all_categories(seeded_store)] == ["cat-phones", "cat-laptops", "cat-audio"]
    assert [c.slug for c in get_featured_categories(seeded_store)] == ["smartphones", "laptops"]
    assert get_category_by_slug(seeded_store, "laptops").id == "cat-laptops"
    assert get_category_by_slug(seeded_store, "nope") is None


def test_create_category_starts_at_zero():
    store = MemoryCatalogStore()
    cid = create_category(store, {"name": "Gaming", "slug": "gaming", "order": 6, "product_count": 12})
    category = get_category_by_id(store, cid)
    assert category.product_count == 0
    assert category.created_at is not None


def test_create_category_rejects_duplicate_slug(seeded_store):
    with pytest.raises(CategoryError, match="already exists"):
        create_category(seeded_store, {"name": "Phones", "slug": "smartphones"})


def test_create_category_validates(seeded_store):
    with pytest.raises(CategoryValidationError) as exc:
        create_category(seeded_store, {"name": "", "slug": "Bad Slug"})
    assert "Category name is required" in exc.value.errors


def test_update_category(seeded_store):
    update_category(seeded_store, "cat-laptops", {"name": "Notebooks", "product_count": 50})
    category = get_category_by_id(seeded_store, "cat-laptops")
    assert category.name == "Notebooks"
    assert category.product_count == 0

    with pytest.raises(CategoryError, match="already exists"):
        update_category(seeded_store, "cat-laptops", {"slug": "smartphones"})
    # own slug is fine
    update_category(seeded_store, "cat-laptops", {"slug": "laptops"})


def test_validate_category_data():
    assert validate_category_data({"name": "Gaming", "slug": "gaming", "order": 6}) == []
    assert validate_category_data({}) == []
    errors = validate_category_data(
        {"name": "x" * 101, "slug": "Has Spaces", "description": "d" * 501, "order": 1001}
    )
    assert errors == [
        "Category name must be less than 100 characters",
        "Category slug must contain only lowercase letters, numbers, and hyphens",
        "Description must be less than 500 characters",
        "Order must be between 0 and 1000",
    ]
    assert "Category slug is required" in validate_category_data({"slug": ""})


def test_generate_category_slug():
    assert generate_category_slug("Audio & Headphones") == "audio-headphones"
    assert generate_category_slug("  PC Components ") == "pc-components"
