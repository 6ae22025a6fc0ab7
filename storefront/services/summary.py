from __future__ import annotations

from ..models.processing_result import ImportRunResult

"""SUMMARY line rendering for import runs."""


def _format_number(value: float) -> str:
    # integers without ".0", tiny values without scientific notation
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ImportRunResult) -> str:
    """Render the SUMMARY line for one import run.

    Format:
    SUMMARY rows={total} valid={valid} invalid={invalid} imported={created}
    failed={failed} elapsed_sec={elapsed} throughput_rps={throughput}

    Examples:
        >>> from datetime import datetime, timezone
        >>> from storefront.models.import_models import BatchImportResult
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ImportRunResult(
        ...     file_name="p.csv", mapping={}, total_rows=10, valid_rows=9, invalid_rows=1,
        ...     import_result=BatchImportResult(success=["a"] * 9), start_time=start,
        ...     end_time=end, elapsed_seconds=2.0, throughput_rows_per_sec=5.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY rows=10 valid=9 invalid=1 imported=9 failed=0 elapsed_sec=2 throughput_rps=5'
    """
    return (
        f"SUMMARY rows={result.total_rows} "
        f"valid={result.valid_rows} "
        f"invalid={result.invalid_rows} "
        f"imported={result.imported} "
        f"failed={result.failed} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
