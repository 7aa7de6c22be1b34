from __future__ import annotations

from types import TracebackType

from stratlab.contexts.backtest.domain.errors import BacktestSubmissionBusyError


class SubmissionGuard:
    """
    In-process guard allowing at most one in-flight submission attempt per strategy id.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py

    The guard is local to one API process and event loop; it is not shared between replicas.
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def hold(self, *, strategy_id: str) -> SubmissionReservation:
        """
        Build async context reserving strategy id while the context is active.

        Args:
            strategy_id: Strategy identifier.
        Returns:
            SubmissionReservation: Async context manager bound to this guard.
        Assumptions:
            Check-and-reserve runs in `__aenter__` without suspension points,
            so it is atomic within the event loop.
        Raises:
            None.
        Side Effects:
            None until the context is entered.
        """
        return SubmissionReservation(guard=self, strategy_id=strategy_id)

    def is_busy(self, *, strategy_id: str) -> bool:
        return strategy_id in self._in_flight

    def _reserve(self, *, strategy_id: str) -> None:
        if strategy_id in self._in_flight:
            raise BacktestSubmissionBusyError(strategy_id=strategy_id)
        self._in_flight.add(strategy_id)

    def _release(self, *, strategy_id: str) -> None:
        self._in_flight.discard(strategy_id)


class SubmissionReservation:
    """One strategy id reservation; released on every exit path, exceptions propagate."""

    def __init__(self, *, guard: SubmissionGuard, strategy_id: str) -> None:
        self._guard = guard
        self._strategy_id = strategy_id

    async def __aenter__(self) -> None:
        self._guard._reserve(strategy_id=self._strategy_id)

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._guard._release(strategy_id=self._strategy_id)
