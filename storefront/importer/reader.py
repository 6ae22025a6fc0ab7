from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import IO, Any

import pandas as pd

from ..models.raw_row import RawRow

"""Tabular file reader for the bulk product import.

The first line is the header; every following non-empty line becomes one
RawRow in file order. Cells are read as text with no NA conversion, so an
empty cell is "" and "NA" stays "NA". Header names are kept verbatim; mapping
them onto catalog fields is the field mapper's job.

A file that cannot be parsed (unterminated quotes, a line with more fields
than the header, a header naming the same column twice, no header at all)
fails as a whole: no partial rows.
"""

__all__ = [
    "CSVParseError",
    "parse_csv",
    "parse_csv_text",
    "read_tabular_file",
    "frame_to_rows",
    "apply_header",
]

CSVSource = str | Path | IO[str] | IO[bytes]


class CSVParseError(Exception):
    """Raised when the uploaded file cannot be parsed into rows."""


def _cell_text(value: Any) -> str:
    # short rows are padded by pandas with NaN; treat them as empty cells
    return value if isinstance(value, str) else ""


def apply_header(df: pd.DataFrame) -> pd.DataFrame:
    """Promote the first row of a headerless DataFrame to column names.

    Raises CSVParseError when the header repeats a column name.
    """
    header = [_cell_text(v) for v in df.iloc[0]]
    repeated = sorted({name for name in header if header.count(name) > 1})
    if repeated:
        raise CSVParseError(f"duplicate header columns: {', '.join(repr(n) for n in repeated)}")
    return df.iloc[1:].set_axis(header, axis=1)


def frame_to_rows(df: pd.DataFrame, *, skip_blank_rows: bool = False) -> list[RawRow]:
    """Convert a header-applied DataFrame into 1-based RawRows."""
    columns = [str(c) for c in df.columns]
    rows: list[RawRow] = []
    number = 0
    for raw in df.itertuples(index=False, name=None):
        values = {col: _cell_text(val) for col, val in zip(columns, raw, strict=False)}
        if skip_blank_rows and not any(v.strip() for v in values.values()):
            continue
        number += 1
        rows.append(RawRow(row_number=number, values=values))
    return rows


def parse_csv(source: CSVSource, *, encoding: str = "utf-8-sig") -> list[RawRow]:
    """Parse a CSV file (path or open file object) into RawRows.

    Parameters
    ----------
    source: file path, or a text/binary file object positioned at the header
    encoding: used for paths and binary streams; the default strips a UTF-8 BOM

    Raises
    ------
    CSVParseError: the input is empty or malformed
    """
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=True,
            header=None,
            encoding=encoding,
        )
    except pd.errors.EmptyDataError as e:
        raise CSVParseError("CSV parsing failed: file has no header row") from e
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        raise CSVParseError(f"CSV parsing failed: {e}") from e
    return frame_to_rows(apply_header(df))


def parse_csv_text(text: str) -> list[RawRow]:
    """Parse CSV content held in memory."""
    return parse_csv(io.StringIO(text))


def read_tabular_file(path: Path) -> list[RawRow]:
    """Read a ``.csv`` or ``.xlsx`` upload into RawRows.

    For workbooks only the first sheet is read, its first row is the header,
    and fully blank rows are skipped.
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return parse_csv(path)
    if suffix == ".xlsx":
        try:
            df = pd.read_excel(path, sheet_name=0, header=None, dtype=str, keep_default_na=False, na_filter=False)
        except (ValueError, zipfile.BadZipFile) as e:
            raise CSVParseError(f"spreadsheet parsing failed: {e}") from e
        if df.empty:
            raise CSVParseError(f"spreadsheet parsing failed: {path.name} has no header row")
        return frame_to_rows(apply_header(df), skip_blank_rows=True)
    raise CSVParseError(f"unsupported file type: {path.name}")
