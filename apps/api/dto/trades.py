"""
Pydantic models and mappers for `POST /trades` trade ledger endpoint.

Docs:
  - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict

from stratlab.contexts.backtest.domain.entities import Trade, TradeLogReport, TradeSummary


class TradesPostRequest(BaseModel):
    """API request model identifying owned strategy whose ledger is fetched."""

    model_config = ConfigDict(extra="forbid")

    strategy_id: str
    user_id: str


class TradeResponse(BaseModel):
    """
    API response model for one ledger trade.

    Malformed numeric ledger fields are rendered as `null`.
    """

    model_config = ConfigDict(extra="forbid")

    id: int | None
    symbol: str
    entry_time: str
    entry_price: float | None
    stop_loss_price: float | None
    exit_price: float | None
    exit_time: str
    pnl_amount: float | None
    pnl_percent: float | None
    quantity: float | None


class TradeSummaryResponse(BaseModel):
    """API response model for one per-symbol trade summary."""

    model_config = ConfigDict(extra="forbid")

    symbol: str
    total_trades: int
    total_pnl: float | None
    avg_pnl: float | None
    total_abs_quantity: float | None


class TradesPostResponse(BaseModel):
    """
    API response model with trades grouped by symbol and ordered summaries.

    Docs:
      - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
    Related:
      - apps/api/routes/trades.py
      - src/stratlab/contexts/backtest/application/services/trade_log_processor.py
    """

    model_config = ConfigDict(extra="forbid")

    grouped_trades: dict[str, list[TradeResponse]]
    summary: list[TradeSummaryResponse]


def build_trades_post_response(*, report: TradeLogReport) -> TradesPostResponse:
    """
    Convert trade log report into JSON-safe API response DTO.

    Args:
        report: Grouped trades and ordered summaries.
    Returns:
        TradesPostResponse: API response with NaN/inf values replaced by `null`.
    Assumptions:
        Group and summary order from report is preserved.
    Raises:
        None.
    Side Effects:
        None.
    """
    return TradesPostResponse(
        grouped_trades={
            symbol: [_to_trade_response(trade=trade) for trade in trades]
            for symbol, trades in report.grouped_trades.items()
        },
        summary=[_to_summary_response(summary=item) for item in report.summary],
    )


def _to_trade_response(*, trade: Trade) -> TradeResponse:
    return TradeResponse(
        id=trade.sequence_id,
        symbol=trade.symbol,
        entry_time=trade.entry_time,
        entry_price=_finite_or_none(trade.entry_price),
        stop_loss_price=_finite_or_none(trade.stop_loss_price),
        exit_price=_finite_or_none(trade.exit_price),
        exit_time=trade.exit_time,
        pnl_amount=_finite_or_none(trade.pnl_amount),
        pnl_percent=_finite_or_none(trade.pnl_percent),
        quantity=_finite_or_none(trade.quantity),
    )


def _to_summary_response(*, summary: TradeSummary) -> TradeSummaryResponse:
    return TradeSummaryResponse(
        symbol=summary.symbol,
        total_trades=summary.total_trades,
        total_pnl=_finite_or_none(summary.total_pnl),
        avg_pnl=_finite_or_none(summary.avg_pnl),
        total_abs_quantity=_finite_or_none(summary.total_abs_quantity),
    )


def _finite_or_none(value: float) -> float | None:
    # JSON has no NaN/Infinity literals.
    if math.isfinite(value):
        return value
    return None
