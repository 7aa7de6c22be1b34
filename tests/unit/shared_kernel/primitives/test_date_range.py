from __future__ import annotations

from datetime import date

import pytest

from stratlab.shared_kernel.primitives import DateRange


def test_date_range_allows_single_day_and_renders_wire_literals() -> None:
    """
    Verify inclusive range semantics and ISO wire rendering.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        `start == end` is a valid one-day range.
    Raises:
        AssertionError: If single-day range or wire literals are wrong.
    Side Effects:
        None.
    """
    one_day = DateRange(start=date(2024, 3, 1), end=date(2024, 3, 1))
    january = DateRange.from_iso(start="2024-01-01", end=" 2024-01-31 ")

    assert one_day.to_wire() == ("2024-03-01", "2024-03-01")
    assert january.to_wire() == ("2024-01-01", "2024-01-31")


def test_date_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError, match="start <= end"):
        DateRange(start=date(2024, 2, 1), end=date(2024, 1, 1))


def test_date_range_from_iso_rejects_malformed_literal() -> None:
    with pytest.raises(ValueError):
        DateRange.from_iso(start="2024-13-01", end="2024-12-31")
