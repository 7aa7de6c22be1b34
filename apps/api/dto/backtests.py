"""
Pydantic models and mappers for `POST /backtest` submission endpoint.

Docs:
  - docs/architecture/backtest/backtest-http-job-handler-v1.md
  - docs/architecture/api/api-errors-v1.md
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel

from apps.api.dto.strategies import StrategyDateRangePayload
from stratlab.contexts.backtest.application.dto import (
    DEFAULT_SOURCE_LANGUAGE,
    BacktestSubmission,
    CreateStrategySubmission,
    ResubmitStrategySubmission,
    StrategyParams,
    SubmitBacktestResult,
)


class _BacktestParamsRequest(BaseModel):
    """
    Shared strategy params of create and resubmit requests.

    Fields are optional at schema level so the use-case reports every missing field at once.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    user_id: str | None = None
    initial_equity: float | None = None
    timeframe: str | None = None
    date_range: StrategyDateRangePayload | None = None
    code: str | None = None
    language: str = DEFAULT_SOURCE_LANGUAGE


class CreateBacktestRequest(_BacktestParamsRequest):
    """Create new Strategy Record and start its first backtest."""

    kind: Literal["create"]


class ResubmitBacktestRequest(_BacktestParamsRequest):
    """Update existing Strategy Record and restart its backtest."""

    kind: Literal["resubmit"]
    strategy_id: str
    run_count: int | None = None


class BacktestPostRequest(
    RootModel[
        Annotated[
            CreateBacktestRequest | ResubmitBacktestRequest,
            Field(discriminator="kind"),
        ]
    ]
):
    """
    API request envelope discriminated by `kind` (`create` | `resubmit`).

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - apps/api/routes/backtests.py
      - src/stratlab/contexts/backtest/application/dto/submit_backtest.py
    """


class BacktestPostResponse(BaseModel):
    """
    API response model for accepted backtest submission.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - apps/api/routes/backtests.py
    """

    model_config = ConfigDict(extra="forbid")

    strategy_id: str
    success: bool
    message: str
    file_path: str | None = None


def build_backtest_submission(*, request: BacktestPostRequest) -> BacktestSubmission:
    """
    Convert strict API request envelope into application submission variant.

    Args:
        request: Parsed discriminated request envelope.
    Returns:
        BacktestSubmission: Create or resubmit variant with raw params.
    Assumptions:
        Field presence and value validation is owned by `SubmitBacktestUseCase`.
    Raises:
        None.
    Side Effects:
        None.
    """
    payload = request.root
    date_range = payload.date_range
    params = StrategyParams(
        name=payload.name or "",
        user_id=payload.user_id or "",
        initial_equity=payload.initial_equity,
        timeframe=payload.timeframe or "",
        date_from=date_range.from_ if date_range is not None else None,
        date_to=date_range.to if date_range is not None else None,
        source_code=payload.code or "",
        language=payload.language,
    )
    if isinstance(payload, ResubmitBacktestRequest):
        return ResubmitStrategySubmission(
            strategy_id=payload.strategy_id,
            params=params,
            run_count=payload.run_count,
        )
    return CreateStrategySubmission(params=params)


def build_backtest_post_response(*, result: SubmitBacktestResult) -> BacktestPostResponse:
    """Convert accepted submission result into API response DTO."""
    return BacktestPostResponse(
        strategy_id=result.strategy_id,
        success=result.accepted,
        message=result.detail,
        file_path=str(result.artifact_path) if result.artifact_path is not None else None,
    )
