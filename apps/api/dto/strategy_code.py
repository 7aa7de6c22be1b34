"""
Pydantic models for `GET /code` strategy source endpoint.

Docs:
  - docs/architecture/backtest/backtest-source-artifacts-v1.md
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from apps.api.dto.strategies import StrategyResponse, build_strategy_response
from stratlab.contexts.backtest.application.dto import StrategyCodeResult


class StrategyCodeResponse(BaseModel):
    """API response model with owned strategy record and its persisted source code."""

    model_config = ConfigDict(extra="forbid")

    success: bool
    code: str
    strategy: StrategyResponse
    message: str | None = None


def build_strategy_code_response(*, result: StrategyCodeResult) -> StrategyCodeResponse:
    """Convert code lookup result into API response DTO."""
    return StrategyCodeResponse(
        success=True,
        code=result.code,
        strategy=build_strategy_response(record=result.strategy),
        message=result.message,
    )
