from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from ..models.import_models import ValidationResult
from ..models.raw_row import RawRow

"""Downloadable error CSV for rows that failed validation.

Layout: ``Row`` (1-based original row number), ``Errors`` (the row's errors
joined with "; "), then the original row's columns in file order. Rows keep
the order of the failed results, which is original file order when the
results come straight from ``validate_products``.
"""

__all__ = [
    "ERROR_SEPARATOR",
    "generate_error_csv",
    "write_error_csv",
]

ERROR_SEPARATOR = "; "
ROW_COLUMN = "Row"
ERRORS_COLUMN = "Errors"


def generate_error_csv(failed_results: Sequence[ValidationResult], original_rows: Sequence[RawRow]) -> str:
    records: list[dict[str, object]] = []
    columns: list[str] = [ROW_COLUMN, ERRORS_COLUMN]
    for result in failed_results:
        original = original_rows[result.row_number - 1]
        record: dict[str, object] = {
            ROW_COLUMN: result.row_number,
            ERRORS_COLUMN: ERROR_SEPARATOR.join(result.errors),
        }
        for column, value in original.values.items():
            # Row / Errors always describe the failure, even if the file had such columns
            if column in record:
                continue
            record[column] = value
            if column not in columns:
                columns.append(column)
        records.append(record)

    df = pd.DataFrame(records, columns=columns)
    return df.to_csv(index=False, lineterminator="\n")


def write_error_csv(
    path: Path, failed_results: Sequence[ValidationResult], original_rows: Sequence[RawRow]
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_error_csv(failed_results, original_rows), encoding="utf-8")
    return path
