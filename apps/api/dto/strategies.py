"""
Pydantic models and mappers for Strategy Record API endpoints.

Docs:
  - docs/architecture/strategy/strategy-record-store-v1.md
  - docs/architecture/api/api-errors-v1.md
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from stratlab.contexts.strategy.domain.entities import StrategyRecord

StrategyStatusLiteral = Literal["draft", "running", "completed", "failed"]


class StrategyDateRangePayload(BaseModel):
    """
    API payload for inclusive backtest date range `{from, to}`.

    Docs:
      - docs/architecture/shared-kernel-primitives.md
    Related:
      - src/stratlab/shared_kernel/primitives/date_range.py
      - apps/api/dto/backtests.py
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    from_: date | None = Field(default=None, alias="from")
    to: date | None = None


class StrategyResponse(BaseModel):
    """
    API response model for one Strategy Record snapshot.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - apps/api/routes/strategies.py
      - apps/api/routes/strategy_code.py
    """

    model_config = ConfigDict(extra="forbid")

    strategy_id: str
    user_id: str
    name: str
    initial_equity: float
    timeframe: str
    date_range: StrategyDateRangePayload
    status: StrategyStatusLiteral
    run_count: int
    last_run_at: datetime | None = None
    error: str | None = None
    created_at: datetime
    updated_at: datetime


class UpdateStrategyRequest(BaseModel):
    """
    API request model for whitelisted Strategy Record edits.

    Omitted fields and omitted date bounds keep their stored values.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    initial_equity: float | None = None
    timeframe: str | None = None
    date_range: StrategyDateRangePayload | None = None


def build_strategy_response(*, record: StrategyRecord) -> StrategyResponse:
    """
    Convert Strategy Record domain snapshot into strict API response DTO.

    Args:
        record: Strategy Record snapshot.
    Returns:
        StrategyResponse: API response DTO.
    Assumptions:
        Record already satisfies domain invariants.
    Raises:
        None.
    Side Effects:
        None.
    """
    return StrategyResponse(
        strategy_id=record.strategy_id,
        user_id=str(record.user_id),
        name=record.name,
        initial_equity=record.initial_equity,
        timeframe=str(record.timeframe),
        date_range=StrategyDateRangePayload(
            from_=record.date_range.start,
            to=record.date_range.end,
        ),
        status=record.status,
        run_count=record.run_count,
        last_run_at=record.last_run_at,
        error=record.error,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )
