from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

from ..importer.error_report import ERROR_SEPARATOR, write_error_csv
from ..importer.field_mapper import invert_mapping, suggest_field_mapping, suggest_mappings
from ..importer.reader import CSVParseError, read_tabular_file
from ..importer.validator import validate_products
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.error_record import CREATE_FAILED, PARSE_FAILED, VALIDATION_FAILED, ErrorRecord
from ..models.import_models import TargetField
from ..models.processing_result import ImportRunResult
from ..store.base import CatalogStore
from .batch_import import batch_create_products, find_duplicates
from .categories import update_all_category_product_counts
from .progress import ProgressTracker

"""End-to-end bulk import run.

    read file -> suggest mapping (+ overrides) -> validate every row
      -> error CSV for invalid rows -> duplicate report
      -> batch create valid rows -> refresh category counts

Only a file that cannot be read or parsed (or a bad mapping override) is
fatal. Invalid rows and failed creates are reported, logged to the JSON Lines
error log, and counted in the result; they never stop the run.
"""

logger = logging.getLogger(__name__)

_VALID_FIELDS = {f.value for f in TargetField}


class ImportProcessingError(Exception):
    """Fatal import failure: nothing was validated or written."""


def build_column_mapping(
    columns: list[str],
    auto_accept_confidence: int,
    overrides: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Auto-accepted suggestions with human overrides applied on top.

    An override of "" skips a column that would otherwise be mapped.
    """
    mapping = suggest_mappings(columns, min_confidence=auto_accept_confidence)
    for column in columns:
        suggestion = suggest_field_mapping(column)
        target = mapping.get(column, "")
        logger.info(
            f"column '{column}' -> {target or '(skip)'} "
            f"(suggested {suggestion.target_field or '(none)'} {suggestion.confidence}%)"
        )

    for column, target in (overrides or {}).items():
        if column not in columns:
            raise ImportProcessingError(f"mapping override names unknown column: {column}")
        if target not in _VALID_FIELDS:
            raise ImportProcessingError(f"mapping override for '{column}' names unknown field: {target}")
        logger.info(f"column '{column}' -> {target or '(skip)'} (override)")
        mapping[column] = target
    return mapping


def run_import(
    path: Path,
    store: CatalogStore,
    config: AppConfig,
    mapping_overrides: Mapping[str, str] | None = None,
    error_csv_path: Path | None = None,
) -> ImportRunResult:
    """Import one CSV/XLSX file into the catalog.

    Args:
        path: file to import
        store: Catalog Store receiving the created products
        config: application config (import settings, log directory)
        mapping_overrides: ``{column: field}`` corrections to the auto mapping
        error_csv_path: where to write the error CSV; defaults to
            ``<error_csv_directory>/<file stem>-errors.csv``

    Returns:
        ImportRunResult with per-row validation results and per-record outcomes

    Raises:
        ImportProcessingError: file missing/unreadable/unparseable or bad override
        StoreError: a catalog store call failed; the error log is still written
    """
    settings = config.import_settings
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(Path(config.logs_directory))

    try:
        rows = read_tabular_file(path)
    except CSVParseError as e:
        error_log.append(ErrorRecord.create(path.name, -1, PARSE_FAILED, str(e)))
        error_log.flush()
        raise ImportProcessingError(str(e)) from e
    except OSError as e:
        raise ImportProcessingError(f"cannot read {path}: {e}") from e

    # flush whatever was buffered, even if a store call raises
    try:
        logger.info(f"read {len(rows)} rows from {path.name}")
        columns = rows[0].columns if rows else []
        mapping = build_column_mapping(columns, settings.auto_accept_confidence, mapping_overrides)
        field_mapping = invert_mapping(mapping)

        with ProgressTracker(len(rows), description="Validating rows") as progress:
            results = validate_products(rows, field_mapping, on_progress=progress.callback)

        invalid = [r for r in results if not r.valid]
        valid = [r for r in results if r.valid and r.data is not None]
        for r in invalid:
            error_log.append(ErrorRecord.create(path.name, r.row_number, VALIDATION_FAILED, ERROR_SEPARATOR.join(r.errors)))

        written_csv: Path | None = None
        if invalid:
            target = error_csv_path or Path(settings.error_csv_directory) / f"{path.stem}-errors.csv"
            written_csv = write_error_csv(target, invalid, rows)
            logger.warning(f"{len(invalid)} rows failed validation; details in {written_csv}")

        records = [r.data for r in valid if r.data is not None]
        duplicates = []
        if settings.detect_duplicates and records:
            duplicates = find_duplicates(store, records, row_numbers=[r.row_number for r in valid])
            for d in duplicates:
                logger.warning(f"row {d.row_number}: '{d.incoming_title}' duplicates product {d.existing_product_id}")

        with ProgressTracker(len(records), description="Creating products", unit="product") as progress:
            import_result = batch_create_products(store, records, on_progress=progress.callback)

        for failure in import_result.errors:
            error_log.append(ErrorRecord.create(path.name, -1, CREATE_FAILED, f"{failure.product}: {failure.error}"))

        refreshed: dict[str, int] | None = None
        if settings.refresh_counts and import_result.success:
            refreshed = update_all_category_product_counts(store)
    finally:
        error_log_path = error_log.flush()

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    throughput = len(rows) / elapsed if elapsed > 0 else 0.0

    return ImportRunResult(
        file_name=path.name,
        mapping=mapping,
        total_rows=len(rows),
        valid_rows=len(valid),
        invalid_rows=len(invalid),
        import_result=import_result,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=throughput,
        validation_results=results,
        duplicates=duplicates,
        error_csv_path=written_csv,
        error_log_path=error_log_path,
        refreshed_counts=refreshed,
    )
