from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models.quality import Grade, QualityBreakdown, QualityScore

"""Listing quality score.

A pure function of the product fields: six weighted components summing to at
most 100, one improvement suggestion per component that misses its top tier,
and a grade derived from the total.

| component   | max | tiers                                              |
|-------------|-----|----------------------------------------------------|
| title       | 10  | non-blank                                          |
| brand       | 10  | non-blank                                          |
| description | 20  | >=200 chars 20, >=100 15, >=50 10, >0 5            |
| images      | 30  | >=5 30, >=3 25, >=2 15, 1 10                       |
| specs       | 20  | >=5 keys 20, >=3 15, >=1 10                        |
| pros/cons   | 10  | 3+/2+ 10, 2+/1+ 7, any 5 (blank entries ignored)   |
"""

__all__ = [
    "calculate_quality_score",
    "grade_for",
]


def _field(product: Any, name: str) -> Any:
    if isinstance(product, Mapping):
        return product.get(name)
    return getattr(product, name, None)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _non_blank_count(items: Any) -> int:
    if not items:
        return 0
    return sum(1 for item in items if isinstance(item, str) and item.strip())


def grade_for(total: int) -> Grade:
    if total >= 85:
        return Grade.EXCELLENT
    if total >= 70:
        return Grade.GOOD
    if total >= 50:
        return Grade.FAIR
    return Grade.POOR


def calculate_quality_score(product: Any) -> QualityScore:
    """Score a product-like record (mapping, Product or NormalizedProduct).

    Missing fields count as empty; an empty record scores 0 with the full
    suggestion list.
    """
    suggestions: list[str] = []

    title = 10 if _text(_field(product, "title")) else 0
    if not title:
        suggestions.append("Add a product title")

    brand = 10 if _text(_field(product, "brand")) else 0
    if not brand:
        suggestions.append("Add brand name")

    desc_length = len(_text(_field(product, "description")))
    if desc_length >= 200:
        description = 20
    elif desc_length >= 100:
        description = 15
        suggestions.append("Expand description to 200+ characters for maximum score")
    elif desc_length >= 50:
        description = 10
        suggestions.append("Expand description to 100+ characters")
    elif desc_length > 0:
        description = 5
        suggestions.append("Write a detailed description (100+ characters)")
    else:
        description = 0
        suggestions.append("Add a product description")

    image_count = len(_field(product, "images") or [])
    if image_count >= 5:
        images = 30
    elif image_count >= 3:
        images = 25
        suggestions.append(f"Add {5 - image_count} more images for perfect score")
    elif image_count >= 2:
        images = 15
        suggestions.append(f"Add {3 - image_count} more images (minimum 3 recommended)")
    elif image_count == 1:
        images = 10
        suggestions.append("Add at least 2 more images")
    else:
        images = 0
        suggestions.append("Upload product images (minimum 3 recommended)")

    spec_count = len(_field(product, "specs") or {})
    if spec_count >= 5:
        specs = 20
    elif spec_count >= 3:
        specs = 15
        suggestions.append(f"Add {5 - spec_count} more specifications for perfect score")
    elif spec_count >= 1:
        specs = 10
        suggestions.append(f"Add {3 - spec_count} more specifications")
    else:
        specs = 0
        suggestions.append("Add product specifications (minimum 3 recommended)")

    pros_count = _non_blank_count(_field(product, "pros"))
    cons_count = _non_blank_count(_field(product, "cons"))
    if pros_count >= 3 and cons_count >= 2:
        proscons = 10
    elif pros_count >= 2 and cons_count >= 1:
        proscons = 7
        suggestions.append("Add more pros/cons for better comparison (3+ pros, 2+ cons)")
    elif pros_count >= 1 or cons_count >= 1:
        proscons = 5
        suggestions.append("Add pros and cons for product comparison")
    else:
        proscons = 0
        suggestions.append("Add pros and cons to help users compare")

    breakdown = QualityBreakdown(
        title=title,
        brand=brand,
        description=description,
        images=images,
        specs=specs,
        proscons=proscons,
    )
    total = breakdown.total()
    return QualityScore(total=total, breakdown=breakdown, suggestions=tuple(suggestions), grade=grade_for(total))
