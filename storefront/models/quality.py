from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Listing quality score models (derived, never persisted)."""

__all__ = [
    "Grade",
    "QualityBreakdown",
    "QualityScore",
]


class Grade(Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass(frozen=True)
class QualityBreakdown:
    title: int = 0  # max 10
    brand: int = 0  # max 10
    description: int = 0  # max 20
    images: int = 0  # max 30
    specs: int = 0  # max 20
    proscons: int = 0  # max 10

    def total(self) -> int:
        return self.title + self.brand + self.description + self.images + self.specs + self.proscons


@dataclass(frozen=True)
class QualityScore:
    total: int  # 0..100, always breakdown.total()
    breakdown: QualityBreakdown
    suggestions: tuple[str, ...]
    grade: Grade
