from __future__ import annotations

import pytest

from stratlab.shared_kernel.primitives import UserId


def test_user_id_strips_surrounding_whitespace() -> None:
    """
    Verify UserId keeps opaque identifier text and only strips surrounding whitespace.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Identifier format is owned by session layer.
    Raises:
        AssertionError: If normalization changes identifier content.
    Side Effects:
        None.
    """
    user_id = UserId("  user-42 ")

    assert str(user_id) == "user-42"
    assert user_id == UserId("user-42")


@pytest.mark.parametrize("raw", ["", "   "])
def test_user_id_rejects_blank_value(raw: str) -> None:
    with pytest.raises(ValueError):
        UserId(raw)


def test_user_id_rejects_non_string_value() -> None:
    with pytest.raises(ValueError):
        UserId(42)  # type: ignore[arg-type]
