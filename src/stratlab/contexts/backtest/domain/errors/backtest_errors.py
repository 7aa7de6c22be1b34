from __future__ import annotations

from typing import Mapping, Sequence


class BacktestDomainError(ValueError):
    """
    Base deterministic domain error for Backtest bounded context.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/use_cases/errors.py
      - src/stratlab/platform/errors/stratlab_error.py
      - apps/api/common/errors.py
    """


class BacktestValidationError(BacktestDomainError):
    """
    Raised when backtest submission parameters violate request invariants.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/dto/submit_backtest.py
      - src/stratlab/contexts/backtest/application/use_cases/errors.py
    """

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[Mapping[str, str]] | None = None,
    ) -> None:
        """
        Build validation error with optional deterministic item payload.

        Args:
            message: Human-readable validation failure description.
            errors: Optional detailed validation items (`path`, `code`, `message`).
        Returns:
            None.
        Assumptions:
            Missing fields are normalized to deterministic fallback values.
        Raises:
            None.
        Side Effects:
            Stores normalized immutable validation items for API mapping layer.
        """
        super().__init__(message)
        normalized_errors: list[dict[str, str]] = []
        if errors is not None:
            for item in errors:
                normalized_errors.append(
                    {
                        "path": str(item.get("path", "unknown")),
                        "code": str(item.get("code", "validation_error")),
                        "message": str(item.get("message", "Validation error")),
                    }
                )
        self._errors = tuple(normalized_errors)

    @property
    def errors(self) -> tuple[Mapping[str, str], ...]:
        """Return immutable normalized validation details."""
        return self._errors


class BacktestSubmissionBusyError(BacktestDomainError):
    """
    Raised when another submission attempt for the same strategy is still in flight.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/submission_guard.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py
    """

    def __init__(self, *, strategy_id: str) -> None:
        super().__init__(f"Backtest submission already in progress for strategy {strategy_id}")
        self.strategy_id = strategy_id


class EngineError(Exception):
    """
    Base error for failures while talking to the remote execution engine.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
      - src/stratlab/contexts/backtest/adapters/outbound/clients/engine_ws/engine_connector.py
    """


class EngineTransportError(EngineError):
    """Raised when the engine connection cannot be opened or breaks mid-exchange."""


class EngineConnectionClosedError(EngineTransportError):
    """
    Raised when the engine peer closes the connection.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/clients/engine_ws/engine_connector.py
    """

    def __init__(self, *, code: int, reason: str) -> None:
        """
        Build close error carrying WebSocket close code and reason.

        Args:
            code: WebSocket close code (`1000` is a normal close).
            reason: Close reason text, possibly empty.
        Returns:
            None.
        Assumptions:
            Abnormal transport loss is reported with code `1006`.
        Raises:
            None.
        Side Effects:
            None.
        """
        super().__init__(f"engine connection closed with code {code}: {reason}")
        self.code = code
        self.reason = reason

    @property
    def is_normal(self) -> bool:
        return self.code == 1000


class EngineTimeoutError(EngineError):
    """Raised when a protocol stage deadline elapses."""


class EngineRejectedError(EngineError):
    """
    Raised when the engine reports a non-success status frame.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
      - src/stratlab/contexts/backtest/application/services/trade_log_fetcher.py
    """

    def __init__(self, *, status: str, error: str | None) -> None:
        """
        Build rejection error with engine-reported status and verbatim error text.

        Args:
            status: Engine status literal.
            error: Optional engine error description.
        Returns:
            None.
        Assumptions:
            Message is `<status>: <error>` or `Unexpected status: <status>` without error text.
        Raises:
            None.
        Side Effects:
            None.
        """
        if error:
            message = f"{status}: {error}"
        else:
            message = f"Unexpected status: {status}"
        super().__init__(message)
        self.status = status
        self.error = error


class EngineProtocolError(EngineError):
    """Raised when an engine frame cannot be interpreted in strict mode."""


class SourceArtifactError(Exception):
    """
    Raised when the strategy source artifact cannot be written or read.

    Docs:
      - docs/architecture/backtest/backtest-source-artifacts-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/persistence/filesystem/
        source_artifact_store.py
    """
