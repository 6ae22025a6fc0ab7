from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for long imports (tqdm, TTY only).

In non-TTY environments (CI, redirected output) no bar is created, so logs
stay free of ANSI control sequences. ``ProgressTracker.callback`` has the
``(current, total)`` signature that ``validate_products`` and
``batch_create_products`` accept as ``on_progress``.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over a known number of rows or records."""

    def __init__(self, total: int, *, description: str = "Validating rows", unit: str = "row") -> None:
        self.total = total
        self.description = description
        self.current = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit=unit,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def callback(self, current: int, total: int) -> None:
        """``on_progress`` hook: advance the bar to ``current``."""
        step = current - self.current
        self.current = current
        if self.enabled and self.pbar is not None and step > 0:
            if total != self.pbar.total:
                self.pbar.total = total
            self.pbar.update(step)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
