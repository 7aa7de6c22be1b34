from __future__ import annotations

from pathlib import Path

import pytest

from stratlab.platform.errors import StratlabError


def test_stratlab_error_payload_normalizes_details_deterministically() -> None:
    """
    Verify payload details are sorted, list-converted, and stringified for non-JSON values.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Error payloads are compared byte-for-byte in API tests.
    Raises:
        AssertionError: If payload normalization differs from contract.
    Side Effects:
        None.
    """
    error = StratlabError(
        code=" conflict ",
        message=" Busy ",
        details={"b": (1, 2), "a": {"path": Path("code/u/s.h")}},
    )

    assert str(error) == "conflict: Busy"
    assert error.to_payload() == {
        "error": {
            "code": "conflict",
            "message": "Busy",
            "details": {"a": {"path": "code/u/s.h"}, "b": [1, 2]},
        }
    }
    assert list(error.to_payload()["error"]["details"]) == ["a", "b"]


def test_stratlab_error_without_details_renders_empty_mapping() -> None:
    error = StratlabError(code="not_found", message="Strategy was not found")

    assert error.to_payload()["error"]["details"] == {}


def test_stratlab_error_rejects_blank_code_and_message() -> None:
    with pytest.raises(ValueError):
        StratlabError(code=" ", message="x")
    with pytest.raises(ValueError):
        StratlabError(code="x", message="")


def test_stratlab_error_accepts_traceback_and_cause_and_keeps_fields_read_only() -> None:
    cause = KeyError("s-1")

    with pytest.raises(StratlabError) as raised:
        try:
            raise cause
        except KeyError as error:
            raise StratlabError(code="not_found", message="Strategy not found") from error

    assert raised.value.__cause__ is cause
    assert raised.value.__traceback__ is not None
    assert str(raised.value) == "not_found: Strategy not found"
    with pytest.raises(AttributeError):
        raised.value.code = "conflict"  # type: ignore[misc]
