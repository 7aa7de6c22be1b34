"""
Strategy source code API route.

Docs:
  - docs/architecture/backtest/backtest-source-artifacts-v1.md
"""

from __future__ import annotations

from fastapi import APIRouter

from apps.api.dto import StrategyCodeResponse, build_strategy_code_response
from stratlab.contexts.backtest.application.use_cases import GetStrategyCodeUseCase


def build_strategy_code_router(*, code_use_case: GetStrategyCodeUseCase) -> APIRouter:
    """
    Build router exposing `GET /code?strategy_id&user_id`.

    Args:
        code_use_case: Strategy code lookup use-case.
    Returns:
        APIRouter: Configured router.
    Assumptions:
        Missing artifact yields `200` with empty code and explanatory message.
    Raises:
        ValueError: If required dependency is missing.
    Side Effects:
        None.
    """
    if code_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_strategy_code_router requires code_use_case")

    router = APIRouter(tags=["backtest"])

    @router.get("/code", response_model=StrategyCodeResponse)
    async def get_code(strategy_id: str = "", user_id: str = "") -> StrategyCodeResponse:
        result = await code_use_case.execute(strategy_id=strategy_id, user_id=user_id)
        return build_strategy_code_response(result=result)

    return router
