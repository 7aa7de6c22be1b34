from __future__ import annotations

import pytest

from stratlab.shared_kernel.primitives import Timeframe


@pytest.mark.parametrize("raw", ["c1m", "c2m", "c3m", "c5m", "c10m", "c15m", "c1h", "c4h"])
def test_timeframe_accepts_supported_codes(raw: str) -> None:
    """
    Verify every engine resolution code is accepted as-is.

    Args:
        raw: Supported resolution code.
    Returns:
        None.
    Assumptions:
        Plain codes are kept verbatim.
    Raises:
        AssertionError: If supported code is rejected or altered.
    Side Effects:
        None.
    """
    timeframe = Timeframe(raw)

    assert str(timeframe) == raw


def test_timeframe_accepts_venue_namespaced_code() -> None:
    timeframe = Timeframe(" bnf.c5m ")

    assert str(timeframe) == "bnf.c5m"


@pytest.mark.parametrize("raw", ["", "5m", "c7m", "bnf.c7m", ".c5m", "C5M"])
def test_timeframe_rejects_unsupported_values(raw: str) -> None:
    """
    Verify unsupported or malformed resolution tags raise ValueError.

    Args:
        raw: Invalid timeframe literal.
    Returns:
        None.
    Assumptions:
        Codes are case-sensitive engine literals.
    Raises:
        AssertionError: If invalid literal is accepted.
    Side Effects:
        None.
    """
    with pytest.raises(ValueError):
        Timeframe(raw)
