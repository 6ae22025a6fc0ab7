from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ..models.catalog import Price, PriceStatus, Product
from ..store.base import PRODUCTS, CatalogStore, prices_collection, utc_now_iso

"""Product catalog operations used by the admin tools and the importer.

Search is a client-side substring filter over title, description and brand;
the Catalog Store offers no full-text index.
"""

__all__ = [
    "SearchPage",
    "create_product",
    "create_product_with_prices",
    "update_product",
    "delete_product",
    "get_product_by_id",
    "get_product_by_slug",
    "get_products_by_category",
    "get_all_products",
    "get_product_prices",
    "get_best_price",
    "search_products",
    "search_products_advanced",
]


@dataclass(frozen=True)
class SearchPage:
    products: list[Product]
    total: int
    page: int
    total_pages: int


def create_product(store: CatalogStore, product: dict[str, Any]) -> str:
    now = utc_now_iso()
    doc = {k: v for k, v in product.items() if k != "id"}
    doc.update(created_at=now, updated_at=now)
    return store.create(PRODUCTS, doc)


def create_product_with_prices(store: CatalogStore, product: dict[str, Any], prices: list[Price]) -> str:
    product_id = create_product(store, product)
    for price in prices:
        doc = price.to_document()
        doc["last_updated"] = utc_now_iso()
        store.create(prices_collection(product_id), doc)
    return product_id


def update_product(store: CatalogStore, product_id: str, updates: dict[str, Any]) -> None:
    partial = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
    partial["updated_at"] = utc_now_iso()
    store.update(PRODUCTS, product_id, partial)


def delete_product(store: CatalogStore, product_id: str) -> None:
    store.delete(PRODUCTS, product_id)


def get_product_by_id(store: CatalogStore, product_id: str) -> Product | None:
    doc = store.get(PRODUCTS, product_id)
    return Product.from_document(product_id, doc) if doc is not None else None


def get_product_by_slug(store: CatalogStore, slug: str) -> Product | None:
    docs = store.list(PRODUCTS, filters=[("seo.slug", slug)], limit=1)
    return Product.from_document(docs[0].id, docs[0].data) if docs else None


def get_all_products(store: CatalogStore, limit: int = 50) -> list[Product]:
    docs = store.list(PRODUCTS, order_by=("created_at", "desc"), limit=limit)
    return [Product.from_document(d.id, d.data) for d in docs]


def get_products_by_category(store: CatalogStore, category_id: str, limit: int = 20) -> list[Product]:
    docs = store.list(
        PRODUCTS, filters=[("category_id", category_id)], order_by=("created_at", "desc"), limit=limit
    )
    return [Product.from_document(d.id, d.data) for d in docs]


def get_product_prices(store: CatalogStore, product_id: str) -> list[Price]:
    return [Price.from_document(d.id, d.data) for d in store.list(prices_collection(product_id))]


def get_best_price(store: CatalogStore, product_id: str) -> Price | None:
    """Lowest in-stock price whose last refresh succeeded, or None."""
    available = [
        p for p in get_product_prices(store, product_id)
        if p.in_stock and p.status is PriceStatus.SUCCESS
    ]
    if not available:
        return None
    return min(available, key=lambda p: p.price)


def _matches(product: Product, needle: str) -> bool:
    return (
        needle in product.title.lower()
        or needle in product.description.lower()
        or needle in product.brand.lower()
    )


def search_products(store: CatalogStore, term: str, limit: int = 20) -> list[Product]:
    needle = term.lower()
    products = [Product.from_document(d.id, d.data) for d in store.list(PRODUCTS)]
    return [p for p in products if _matches(p, needle)][:limit]


def search_products_advanced(
    store: CatalogStore,
    query: str = "",
    category_id: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> SearchPage:
    """Category filter + substring match + page slicing (1-based pages)."""
    filters = [("category_id", category_id)] if category_id else None
    docs = store.list(PRODUCTS, filters=filters, order_by=("created_at", "desc"))
    products = [Product.from_document(d.id, d.data) for d in docs]
    if query:
        needle = query.lower()
        products = [p for p in products if _matches(p, needle)]

    total = len(products)
    start = (page - 1) * limit
    return SearchPage(
        products=products[start:start + limit],
        total=total,
        page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
    )
