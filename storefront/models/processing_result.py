from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .import_models import BatchImportResult, DuplicateMatch, ValidationResult

"""Result model for one end-to-end import run.

Aggregates what the SUMMARY line and the CLI exit code need: how many rows
were read, how many validated, how many were created, and where the error
artifacts were written.
"""


@dataclass(frozen=True)
class ImportRunResult:
    """Aggregated outcome of ``services.orchestrator.run_import``."""
    file_name: str
    mapping: dict[str, str]  # column -> field, as used for validation
    total_rows: int
    valid_rows: int
    invalid_rows: int
    import_result: BatchImportResult
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # total_rows / elapsed
    validation_results: list[ValidationResult] = field(default_factory=list)
    duplicates: list[DuplicateMatch] = field(default_factory=list)
    error_csv_path: Path | None = None  # only written when invalid rows exist
    error_log_path: Path | None = None
    refreshed_counts: dict[str, int] | None = None  # category id -> product_count

    @property
    def imported(self) -> int:
        return len(self.import_result.success)

    @property
    def failed(self) -> int:
        return len(self.import_result.errors)

    @property
    def is_partial_failure(self) -> bool:
        return self.invalid_rows > 0 or self.failed > 0
