from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

"""Catalog domain models: products, categories and marketplace prices.

Documents in the Catalog Store are plain mappings; these dataclasses are the
typed view used by the services. ``from_document`` tolerates missing keys by
falling back to the same defaults the admin forms use, and ``to_document``
produces the mapping that gets written back.
"""

__all__ = [
    "SeoInfo",
    "NormalizedProduct",
    "Product",
    "Category",
    "Price",
    "PriceStatus",
]


@dataclass(frozen=True)
class SeoInfo:
    slug: str
    meta_title: str | None = None
    meta_description: str | None = None

    @staticmethod
    def from_document(doc: dict[str, Any] | None) -> SeoInfo:
        doc = doc or {}
        return SeoInfo(
            slug=doc.get("slug") or "",
            meta_title=doc.get("meta_title"),
            meta_description=doc.get("meta_description"),
        )


@dataclass(frozen=True)
class NormalizedProduct:
    """Validated, store-ready product produced by the row validator.

    specs / pros / cons / images are always empty on import, whatever the
    source columns hold.
    """
    title: str
    category_id: str
    brand: str = "Unknown"
    description: str = ""
    specs: dict[str, Any] = field(default_factory=dict)
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    seo: SeoInfo = field(default_factory=lambda: SeoInfo(slug=""))

    def to_document(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Product:
    """A product document as stored in the ``products`` collection."""
    id: str
    title: str
    description: str = ""
    brand: str = ""
    category_id: str | None = None  # None after a forced category delete
    images: list[str] = field(default_factory=list)  # first image is the main one
    specs: dict[str, Any] = field(default_factory=dict)
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    seo: SeoInfo = field(default_factory=lambda: SeoInfo(slug=""))
    created_at: str | None = None  # ISO8601 UTC
    updated_at: str | None = None

    @staticmethod
    def from_document(doc_id: str, doc: dict[str, Any]) -> Product:
        return Product(
            id=doc_id,
            title=doc.get("title") or "",
            description=doc.get("description") or "",
            brand=doc.get("brand") or "",
            category_id=doc.get("category_id"),
            images=list(doc.get("images") or []),
            specs=dict(doc.get("specs") or {}),
            pros=list(doc.get("pros") or []),
            cons=list(doc.get("cons") or []),
            seo=SeoInfo.from_document(doc.get("seo")),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    @property
    def main_image(self) -> str | None:
        return self.images[0] if self.images else None


@dataclass(frozen=True)
class Category:
    """A category document.

    ``product_count`` is a cached, eventually-consistent count. It is not
    maintained on product writes and only becomes exact again after an
    explicit refresh (see ``services.categories.update_category_product_count``).
    """
    id: str
    name: str
    slug: str  # unique, lowercase alnum + hyphen
    description: str = ""  # <= 500 chars
    icon: str | None = None
    featured: bool = False
    order: int = 0  # 0..1000
    product_count: int = 0
    image_url: str | None = None
    parent_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @staticmethod
    def from_document(doc_id: str, doc: dict[str, Any]) -> Category:
        return Category(
            id=doc_id,
            name=doc.get("name") or "",
            slug=doc.get("slug") or "",
            description=doc.get("description") or "",
            icon=doc.get("icon"),
            featured=bool(doc.get("featured", False)),
            order=int(doc.get("order") or 0),
            product_count=int(doc.get("product_count") or 0),
            image_url=doc.get("image_url"),
            parent_id=doc.get("parent_id"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )


class PriceStatus(Enum):
    """Refresh status of a marketplace price record."""
    SUCCESS = "success"
    PENDING = "pending"
    RETRYING = "retrying"
    FAILED = "failed"


@dataclass(frozen=True)
class Price:
    """Per-marketplace price record (``products/<id>/prices`` subcollection)."""
    marketplace: str
    price: float
    currency: str = "AED"
    in_stock: bool = True
    affiliate_url: str = ""
    discount_percent: float = 0.0
    status: PriceStatus = PriceStatus.SUCCESS
    retry_count: int = 0
    consecutive_failures: int = 0
    last_error: str | None = None
    next_retry_at: str | None = None
    last_updated: str | None = None
    id: str | None = None

    @staticmethod
    def from_document(doc_id: str, doc: dict[str, Any]) -> Price:
        return Price(
            id=doc_id,
            marketplace=doc.get("marketplace") or "",
            price=float(doc.get("price") or 0.0),
            currency=doc.get("currency") or "AED",
            in_stock=bool(doc.get("in_stock", False)),
            affiliate_url=doc.get("affiliate_url") or "",
            discount_percent=float(doc.get("discount_percent") or 0.0),
            status=PriceStatus(doc.get("status") or "pending"),
            retry_count=int(doc.get("retry_count") or 0),
            consecutive_failures=int(doc.get("consecutive_failures") or 0),
            last_error=doc.get("last_error"),
            next_retry_at=doc.get("next_retry_at"),
            last_updated=doc.get("last_updated"),
        )

    def to_document(self) -> dict[str, Any]:
        doc = asdict(self)
        doc.pop("id")
        doc["status"] = self.status.value
        return doc
