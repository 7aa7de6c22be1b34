from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class DateRange:
    """
    DateRange — closed calendar date interval of a backtest run.

    Semantics:
    - both `start` and `end` are included; `start == end` is a one-day run.

    Invariants:
    - start <= end
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise ValueError("DateRange requires date values for start and end")
        if self.start > self.end:
            raise ValueError(
                f"DateRange requires start <= end, got start={self.start} end={self.end}"
            )

    @classmethod
    def from_iso(cls, *, start: str, end: str) -> DateRange:
        """
        Parse date range from `YYYY-MM-DD` wire literals.

        Args:
            start: Range start literal.
            end: Range end literal.
        Returns:
            DateRange: Parsed value object.
        Assumptions:
            Literals use ISO calendar date format.
        Raises:
            ValueError: If a literal cannot be parsed or range is inverted.
        Side Effects:
            None.
        """
        return cls(start=date.fromisoformat(start.strip()), end=date.fromisoformat(end.strip()))

    def to_wire(self) -> tuple[str, str]:
        """Return `(from, to)` ISO literals used in engine frames."""
        return (self.start.isoformat(), self.end.isoformat())
