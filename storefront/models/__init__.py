"""Domain models for the storefront catalog import and scoring tools.

This package contains the dataclasses shared by the importer, the store and
the services.
"""

from .catalog import Category, NormalizedProduct, Price, PriceStatus, Product, SeoInfo
from .config_models import AppConfig, ImportSettings, StoreConfig
from .error_record import ErrorRecord
from .import_models import (
    BatchImportResult,
    DuplicateMatch,
    FieldMapping,
    ImportFailure,
    TargetField,
    ValidationResult,
)
from .processing_result import ImportRunResult
from .quality import Grade, QualityBreakdown, QualityScore
from .raw_row import RawRow

__all__ = [
    # Configuration models
    "AppConfig",
    "ImportSettings",
    "StoreConfig",
    # Catalog models
    "Category",
    "NormalizedProduct",
    "Price",
    "PriceStatus",
    "Product",
    "SeoInfo",
    # Import models
    "BatchImportResult",
    "DuplicateMatch",
    "ErrorRecord",
    "FieldMapping",
    "ImportFailure",
    "ImportRunResult",
    "RawRow",
    "TargetField",
    "ValidationResult",
    # Quality models
    "Grade",
    "QualityBreakdown",
    "QualityScore",
]
