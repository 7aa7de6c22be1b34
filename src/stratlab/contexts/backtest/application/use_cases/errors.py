from __future__ import annotations

from typing import Any, Mapping, Sequence

from stratlab.contexts.backtest.domain.errors import (
    BacktestSubmissionBusyError,
    BacktestValidationError,
    EngineError,
    SourceArtifactError,
)
from stratlab.contexts.strategy.application.use_cases.errors import map_strategy_exception
from stratlab.contexts.strategy.domain.errors import StrategyDomainError
from stratlab.platform.errors import StratlabError


def validation_error(
    *,
    message: str,
    errors: Sequence[Mapping[str, str]] | None = None,
) -> StratlabError:
    """
    Build canonical `validation_error` StratlabError with deterministic item ordering.

    Docs:
      - docs/architecture/api/api-errors-v1.md
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - src/stratlab/contexts/backtest/domain/errors/backtest_errors.py
      - apps/api/common/errors.py

    Args:
        message: Human-readable validation failure message.
        errors: Optional validation items list.
    Returns:
        StratlabError: Canonical deterministic validation error.
    Assumptions:
        Validation item entries contain `path`, `code`, and `message`.
    Raises:
        None.
    Side Effects:
        None.
    """
    details: dict[str, Any] = {}
    if errors is not None:
        details["errors"] = sorted(
            (dict(item) for item in errors),
            key=lambda item: (item["path"], item["code"], item["message"]),
        )
    return StratlabError(code="validation_error", message=message, details=details)


def backtest_submission_failed(
    *,
    strategy_id: str,
    reason: str,
    failure_kind: str | None,
) -> StratlabError:
    """
    Build `backtest_submission_failed` error from rejected submission outcome.

    Args:
        strategy_id: Submitted strategy identifier.
        reason: Human-readable engine, transport, or artifact failure reason.
        failure_kind: Failure classification of the attempt.
    Returns:
        StratlabError: Error mapped to HTTP 502 by API layer.
    Assumptions:
        Record already carries `status=failed` with the same reason.
    Raises:
        None.
    Side Effects:
        None.
    """
    return StratlabError(
        code="backtest_submission_failed",
        message="Backtest failed to start",
        details={
            "strategy_id": strategy_id,
            "reason": reason or "unknown error",
            "failure_kind": failure_kind or "unexpected",
        },
    )


def backtest_busy(*, strategy_id: str) -> StratlabError:
    """Build conflict error for concurrent submission of one strategy."""
    return StratlabError(
        code="conflict",
        message="Backtest submission already in progress",
        details={"strategy_id": strategy_id},
    )


def engine_unavailable(*, error: Exception) -> StratlabError:
    """Build `engine_unavailable` error for failed engine exchanges outside submission."""
    return StratlabError(
        code="engine_unavailable",
        message="Execution engine request failed",
        details={"reason": str(error) or type(error).__name__},
    )


def map_backtest_exception(*, error: Exception) -> StratlabError:
    """
    Map known Backtest/Strategy domain and engine exceptions to canonical StratlabError.

    Args:
        error: Caught exception.
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
    if isinstance(error, BacktestValidationError):
        return validation_error(message=str(error), errors=error.errors)
    if isinstance(error, BacktestSubmissionBusyError):
        return backtest_busy(strategy_id=error.strategy_id)
    if isinstance(error, EngineError):
        return engine_unavailable(error=error)
    if isinstance(error, SourceArtifactError):
        return StratlabError(
            code="unexpected_error",
            message="Strategy source artifact operation failed",
            details={"reason": str(error)},
        )
    if isinstance(error, StrategyDomainError):
        return map_strategy_exception(error=error)

    return StratlabError(
        code="unexpected_error",
        message="Unexpected backtest operation error",
        details={"reason": str(error)},
    )
