# app/parsers/ranges.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DateRange:
    """Commissioning period; ``end`` is None for open-ended validity."""

    start: date
    end: date | None = None

    def __post_init__(self):
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Date range ends before it starts: {self.start} > {self.end}")

    @property
    def is_open_ended(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class PowerRange:
    """Power output range in kW; ``end`` is None for no upper limit."""

    start: float
    end: float | None = None

    def __post_init__(self):
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Power range ends before it starts: {self.start} > {self.end}")
