"""
Backtest submission API route: create-or-resubmit strategy and start engine job.

Docs:
  - docs/architecture/backtest/backtest-http-job-handler-v1.md
  - docs/architecture/api/api-errors-v1.md
"""

from __future__ import annotations

from fastapi import APIRouter

from apps.api.dto import (
    BacktestPostRequest,
    BacktestPostResponse,
    build_backtest_post_response,
    build_backtest_submission,
)
from stratlab.contexts.backtest.application.use_cases import (
    SubmitBacktestUseCase,
    backtest_submission_failed,
)


def build_backtests_router(*, submit_use_case: SubmitBacktestUseCase) -> APIRouter:
    """
    Build router exposing `POST /backtest`.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - apps/api/dto/backtests.py
      - apps/api/wiring/modules/backtest.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py

    Args:
        submit_use_case: Backtest submission use-case.
    Returns:
        APIRouter: Configured backtest router.
    Assumptions:
        Business logic is implemented in use-cases; route layer only maps DTOs.
    Raises:
        ValueError: If required dependency is missing.
    Side Effects:
        None.
    """
    if submit_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_backtests_router requires submit_use_case")

    router = APIRouter(tags=["backtest"])

    @router.post("/backtest", response_model=BacktestPostResponse)
    async def post_backtest(request: BacktestPostRequest) -> BacktestPostResponse:
        """
        Create or resubmit strategy and run one engine submission attempt.

        Args:
            request: Discriminated create/resubmit request envelope.
        Returns:
            BacktestPostResponse: Accepted submission payload.
        Assumptions:
            Rejected attempts are already persisted as `failed` by the use-case.
        Raises:
            StratlabError: Validation/not_found/forbidden/conflict errors, or
                `backtest_submission_failed` (HTTP 502) for rejected attempts.
        Side Effects:
            Writes Strategy Record, talks to engine, may write source artifact.
        """
        result = await submit_use_case.execute(
            submission=build_backtest_submission(request=request)
        )
        if not result.accepted:
            raise backtest_submission_failed(
                strategy_id=result.strategy_id,
                reason=result.detail,
                failure_kind=result.failure_kind,
            )
        return build_backtest_post_response(result=result)

    return router
