from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class Trade:
    """
    Trade — one closed position parsed positionally from an engine trade ledger line.

    Docs:
      - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/trade_log_processor.py
      - apps/api/dto/trades.py

    Malformed numeric fields are kept as NaN (`sequence_id` as `None`) and never rejected.
    """

    sequence_id: int | None
    symbol: str
    entry_time: str
    entry_price: float
    stop_loss_price: float
    exit_price: float
    exit_time: str
    pnl_amount: float
    pnl_percent: float
    quantity: float


@dataclass(frozen=True, slots=True)
class TradeSummary:
    """
    TradeSummary — per-instrument aggregate of ledger trades.

    Docs:
      - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/trade_log_processor.py
    """

    symbol: str
    total_trades: int
    total_pnl: float
    avg_pnl: float
    total_abs_quantity: float

    def __post_init__(self) -> None:
        if self.total_trades <= 0:
            raise ValueError("TradeSummary.total_trades must be > 0")


@dataclass(frozen=True, slots=True)
class TradeLogReport:
    """
    TradeLogReport — grouped trades keyed by symbol plus ordered per-symbol summaries.

    Docs:
      - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/trade_log_processor.py
      - src/stratlab/contexts/backtest/application/use_cases/fetch_strategy_trades.py
      - apps/api/routes/trades.py
    """

    grouped_trades: Mapping[str, tuple[Trade, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    summary: tuple[TradeSummary, ...] = ()

    def __post_init__(self) -> None:
        """
        Freeze grouped trades mapping and check it agrees with summary symbols.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Grouping preserves first-seen symbol order.
        Raises:
            ValueError: If summary symbols differ from grouped symbols.
        Side Effects:
            Replaces `grouped_trades` with read-only mapping proxy copy.
        """
        frozen_groups = {symbol: tuple(trades) for symbol, trades in self.grouped_trades.items()}
        if {item.symbol for item in self.summary} != set(frozen_groups):
            raise ValueError("TradeLogReport.summary symbols must match grouped_trades keys")
        object.__setattr__(self, "grouped_trades", MappingProxyType(frozen_groups))
        object.__setattr__(self, "summary", tuple(self.summary))

    @property
    def total_trades(self) -> int:
        return sum(len(trades) for trades in self.grouped_trades.values())
