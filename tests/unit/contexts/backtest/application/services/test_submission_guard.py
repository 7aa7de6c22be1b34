from __future__ import annotations

import asyncio

import pytest

from stratlab.contexts.backtest.application.services import SubmissionGuard
from stratlab.contexts.backtest.domain.errors import BacktestSubmissionBusyError
from stratlab.platform.errors import StratlabError


def test_submission_guard_rejects_second_hold_and_releases_on_error() -> None:
    """
    Verify one in-flight reservation per strategy id and release on every exit path.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Guard is used inside one event loop.
    Raises:
        AssertionError: If reservation semantics are broken.
    Side Effects:
        None.
    """
    guard = SubmissionGuard()

    async def scenario() -> None:
        async with guard.hold(strategy_id="s-1"):
            assert guard.is_busy(strategy_id="s-1")
            with pytest.raises(BacktestSubmissionBusyError):
                async with guard.hold(strategy_id="s-1"):
                    pass
            async with guard.hold(strategy_id="s-2"):
                assert guard.is_busy(strategy_id="s-2")

        with pytest.raises(RuntimeError):
            async with guard.hold(strategy_id="s-1"):
                raise RuntimeError("attempt crashed")

    asyncio.run(scenario())

    assert not guard.is_busy(strategy_id="s-1")
    assert not guard.is_busy(strategy_id="s-2")


def test_submission_guard_propagates_use_case_errors_unchanged() -> None:
    guard = SubmissionGuard()
    raised = StratlabError(code="not_found", message="Strategy was not found")

    async def scenario() -> None:
        async with guard.hold(strategy_id="s-1"):
            raise raised

    with pytest.raises(StratlabError) as error:
        asyncio.run(scenario())

    assert error.value is raised
    assert error.value.__traceback__ is not None
    assert not guard.is_busy(strategy_id="s-1")
