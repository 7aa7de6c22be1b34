from .trade_log import Trade, TradeLogReport, TradeSummary

__all__ = [
    "Trade",
    "TradeLogReport",
    "TradeSummary",
]
