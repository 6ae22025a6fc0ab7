from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from ..models.catalog import NormalizedProduct, SeoInfo
from ..models.import_models import TargetField, ValidationResult
from ..models.raw_row import RawRow

"""Per-row validation for the bulk product import.

Field policy:
- title: required; missing or blank -> "Title is missing or empty"
- category_id: required; missing or blank -> "Category is missing or empty"
- brand: optional, defaults to "Unknown"
- description: optional, defaults to ""
- specs / pros / cons / images: always empty, whatever the file holds
- seo.slug: derived from the trimmed title

Validation never raises for row content: defects are collected into
ValidationResult.errors and the run continues with the next row.
"""

__all__ = [
    "TITLE_MISSING",
    "CATEGORY_MISSING",
    "DEFAULT_COLUMNS",
    "generate_slug",
    "validate_product_row",
    "validate_products",
]

logger = logging.getLogger(__name__)

TITLE_MISSING = "Title is missing or empty"
CATEGORY_MISSING = "Category is missing or empty"

# column looked up when a field has no confirmed mapping
DEFAULT_COLUMNS: dict[str, str] = {
    TargetField.TITLE.value: "title",
    TargetField.BRAND.value: "brand",
    TargetField.DESCRIPTION.value: "description",
    TargetField.CATEGORY_ID.value: "category",
}

_NON_SLUG = re.compile(r"[^a-z0-9]+")

ProgressCallback = Callable[[int, int], None]


def generate_slug(text: str) -> str:
    """Lowercase, collapse every non ``[a-z0-9]`` run to "-", trim hyphens."""
    return _NON_SLUG.sub("-", text.lower()).strip("-")


def _cell(row: RawRow, field_mapping: dict[str, str], target: str) -> str:
    column = field_mapping.get(target) or DEFAULT_COLUMNS[target]
    value = row.values.get(column)
    return value.strip() if value else ""


def validate_product_row(row: RawRow, row_number: int, field_mapping: dict[str, str]) -> ValidationResult:
    """Validate one raw row against a confirmed ``{field: column}`` mapping."""
    errors: list[str] = []

    title = _cell(row, field_mapping, TargetField.TITLE.value)
    if not title:
        errors.append(TITLE_MISSING)

    category_id = _cell(row, field_mapping, TargetField.CATEGORY_ID.value)
    if not category_id:
        errors.append(CATEGORY_MISSING)

    if errors:
        return ValidationResult(valid=False, errors=tuple(errors), row_number=row_number)

    data = NormalizedProduct(
        title=title,
        category_id=category_id,
        brand=_cell(row, field_mapping, TargetField.BRAND.value) or "Unknown",
        description=_cell(row, field_mapping, TargetField.DESCRIPTION.value),
        seo=SeoInfo(slug=generate_slug(title)),
    )
    return ValidationResult(valid=True, errors=(), row_number=row_number, data=data)


def validate_products(
    rows: Sequence[RawRow],
    field_mapping: dict[str, str],
    on_progress: ProgressCallback | None = None,
) -> list[ValidationResult]:
    """Validate every row in order.

    Row numbers are positional (1-based index into ``rows``), so
    ``results[i].row_number - 1`` always points back at ``rows[i]``.
    """
    results: list[ValidationResult] = []
    total = len(rows)
    for index, row in enumerate(rows, start=1):
        results.append(validate_product_row(row, index, field_mapping))
        if on_progress is not None:
            on_progress(index, total)

    invalid = sum(1 for r in results if not r.valid)
    logger.debug(f"validated {total} rows ({invalid} invalid)")
    return results
