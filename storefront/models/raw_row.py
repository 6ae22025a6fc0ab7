from __future__ import annotations

from dataclasses import dataclass

"""RawRow model for the catalog CSV import.

RawRow represents a single data line of an uploaded CSV (or XLSX) file after
parsing. Column names are the header cells verbatim; every value is a string.
"""

__all__ = [
    "RawRow",
]


@dataclass(frozen=True)
class RawRow:
    """One parsed data line as column -> string value pairs.

    The row_number is 1-based and follows file order (the first data line
    under the header is row 1), so error reports can re-associate a
    validation result with its original line by index.
    """
    row_number: int  # 1-based, file order
    values: dict[str, str]  # header cell -> cell text ("" for empty cells)

    @property
    def columns(self) -> list[str]:
        return list(self.values.keys())

    def get(self, column: str, default: str | None = None) -> str | None:
        return self.values.get(column, default)
