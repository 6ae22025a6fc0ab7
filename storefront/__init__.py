"""Storefront catalog tooling: bulk product import, listing quality scores and
category consistency rules over a document-style Catalog Store."""

from .importer.error_report import generate_error_csv
from .importer.field_mapper import suggest_field_mapping
from .importer.reader import CSVParseError, parse_csv, parse_csv_text
from .importer.validator import validate_product_row, validate_products
from .services.batch_import import batch_create_products
from .services.categories import (
    delete_category,
    force_delete_category_with_reassignment,
    update_all_category_product_counts,
    update_category_product_count,
)
from .services.quality import calculate_quality_score

__version__ = "0.1.0"

__all__ = [
    "CSVParseError",
    "batch_create_products",
    "calculate_quality_score",
    "delete_category",
    "force_delete_category_with_reassignment",
    "generate_error_csv",
    "parse_csv",
    "parse_csv_text",
    "suggest_field_mapping",
    "update_all_category_product_counts",
    "update_category_product_count",
    "validate_product_row",
    "validate_products",
]
