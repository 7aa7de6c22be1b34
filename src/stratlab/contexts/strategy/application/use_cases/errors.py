from __future__ import annotations

from typing import Any, Mapping, Sequence

from stratlab.contexts.strategy.domain.errors import (
    StrategyStatusTransitionError,
    StrategyStorageError,
    StrategyValidationError,
)
from stratlab.platform.errors import StratlabError


def validation_error(
    *,
    message: str,
    errors: Sequence[Mapping[str, str]] | None = None,
) -> StratlabError:
    """
    Build canonical `validation_error` StratlabError with deterministic sorted errors list.

    Args:
        message: Human-readable validation failure description.
        errors: Optional validation item list (`path`, `code`, `message`).
    Returns:
        StratlabError: Canonical validation error object.
    Assumptions:
        Each validation item is JSON-serializable and contains string fields.
    Raises:
        None.
    Side Effects:
        None.
    """
    details: dict[str, Any] = {}
    if errors is not None:
        details["errors"] = _sorted_validation_items(items=errors)
    return StratlabError(code="validation_error", message=message, details=details)


def strategy_not_found(*, strategy_id: str) -> StratlabError:
    """
    Build deterministic not-found error for missing strategy record.

    Args:
        strategy_id: Requested strategy identifier.
    Returns:
        StratlabError: Not-found error contract.
    Assumptions:
        None.
    Raises:
        None.
    Side Effects:
        None.
    """
    return StratlabError(
        code="not_found",
        message="Strategy was not found",
        details={"strategy_id": strategy_id},
    )


def strategy_forbidden(*, strategy_id: str) -> StratlabError:
    """
    Build deterministic forbidden error for non-owner strategy access attempts.

    Args:
        strategy_id: Strategy identifier attempted by non-owner.
    Returns:
        StratlabError: Forbidden error contract.
    Assumptions:
        Owner checks are explicit in use-cases and independent from store filtering.
    Raises:
        None.
    Side Effects:
        None.
    """
    return StratlabError(
        code="forbidden",
        message="Strategy does not belong to current user",
        details={"strategy_id": strategy_id},
    )


def strategy_conflict(*, message: str, details: Mapping[str, Any]) -> StratlabError:
    """Build deterministic conflict error for status-transition or concurrency violations."""
    return StratlabError(code="conflict", message=message, details=dict(details))


def map_strategy_exception(*, error: Exception) -> StratlabError:
    """
    Map known Strategy domain/storage exceptions to canonical StratlabError variants.

    Args:
        error: Caught strategy exception.
    Returns:
        StratlabError: Canonical mapped error object.
    Assumptions:
        Unknown exceptions are mapped to generic `unexpected_error` response contract.
    Raises:
        None.
    Side Effects:
        None.
    """
    if isinstance(error, StratlabError):
        return error
    if isinstance(error, StrategyValidationError):
        return validation_error(message=str(error))
    if isinstance(error, StrategyStatusTransitionError):
        return strategy_conflict(
            message="Strategy status transition is invalid",
            details={"reason": str(error)},
        )
    if isinstance(error, StrategyStorageError):
        return StratlabError(
            code="unexpected_error",
            message="Strategy storage operation failed",
            details={"reason": str(error)},
        )

    return StratlabError(
        code="unexpected_error",
        message="Unexpected strategy operation error",
        details={"reason": str(error)},
    )


def _sorted_validation_items(*, items: Sequence[Mapping[str, str]]) -> list[dict[str, str]]:
    """
    Normalize and deterministically sort validation item list.

    Args:
        items: Input validation item sequence.
    Returns:
        list[dict[str, str]]: Sorted normalized list.
    Assumptions:
        Missing fields are replaced with deterministic fallbacks.
    Raises:
        None.
    Side Effects:
        None.
    """
    normalized_items = [
        {
            "path": str(item.get("path", "unknown")),
            "code": str(item.get("code", "validation_error")),
            "message": str(item.get("message", "Validation error")),
        }
        for item in items
    ]
    return sorted(normalized_items, key=lambda row: (row["path"], row["code"], row["message"]))
