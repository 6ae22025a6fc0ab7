from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .catalog import NormalizedProduct

"""Import session models: column mappings, validation results and batch outcomes.

None of these are persisted; they live for the duration of one import run.
"""

__all__ = [
    "TargetField",
    "FieldMapping",
    "ValidationResult",
    "ImportFailure",
    "BatchImportResult",
    "DuplicateMatch",
]


class TargetField(Enum):
    """Catalog fields a CSV column can be mapped onto.

    SKIP ("") marks a column the import ignores.
    """
    TITLE = "title"
    BRAND = "brand"
    DESCRIPTION = "description"
    CATEGORY_ID = "category_id"
    IMAGES = "images"
    SPECS = "specs"
    SKIP = ""


@dataclass(frozen=True)
class FieldMapping:
    """Proposed (or human-confirmed) association of a CSV column to a field."""
    source_column: str
    target_field: str  # TargetField value, "" = unmapped
    confidence: int  # 0..100

    @property
    def is_mapped(self) -> bool:
        return self.target_field != TargetField.SKIP.value


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one raw row.

    ``data`` is present iff ``valid`` is True. ``row_number`` is the 1-based
    position of the source row and is used to find it again when the error
    CSV is generated.
    """
    valid: bool
    errors: tuple[str, ...]
    row_number: int
    data: NormalizedProduct | None = None


@dataclass(frozen=True)
class ImportFailure:
    product: str  # title of the record that failed
    error: str  # store error message


@dataclass
class BatchImportResult:
    """Per-item outcome of a best-effort batch create."""
    success: list[str] = field(default_factory=list)  # created ids, input order
    errors: list[ImportFailure] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.success) + len(self.errors)


@dataclass(frozen=True)
class DuplicateMatch:
    """An incoming record whose slug already exists in the catalog.

    Reported only: the import still creates the record.
    """
    existing_product_id: str
    incoming_title: str
    row_number: int | None
    match_reason: str
