"""
Trade ledger API route: fetch engine ledger for owned strategy and summarize it.

Docs:
  - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
  - docs/architecture/api/api-errors-v1.md
"""

from __future__ import annotations

from fastapi import APIRouter

from apps.api.dto import TradesPostRequest, TradesPostResponse, build_trades_post_response
from stratlab.contexts.backtest.application.use_cases import FetchStrategyTradesUseCase


def build_trades_router(*, trades_use_case: FetchStrategyTradesUseCase) -> APIRouter:
    """
    Build router exposing `POST /trades`.

    Docs:
      - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
    Related:
      - apps/api/dto/trades.py
      - src/stratlab/contexts/backtest/application/use_cases/fetch_strategy_trades.py

    Args:
        trades_use_case: Trade ledger fetch use-case.
    Returns:
        APIRouter: Configured router.
    Assumptions:
        Engine failures surface as `engine_unavailable` (HTTP 502).
    Raises:
        ValueError: If required dependency is missing.
    Side Effects:
        None.
    """
    if trades_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_trades_router requires trades_use_case")

    router = APIRouter(tags=["backtest"])

    @router.post("/trades", response_model=TradesPostResponse)
    async def post_trades(request: TradesPostRequest) -> TradesPostResponse:
        report = await trades_use_case.execute(
            strategy_id=request.strategy_id,
            user_id=request.user_id,
        )
        return build_trades_post_response(report=report)

    return router
