from .backtests import (
    BacktestPostRequest,
    BacktestPostResponse,
    CreateBacktestRequest,
    ResubmitBacktestRequest,
    build_backtest_post_response,
    build_backtest_submission,
)
from .strategy_code import StrategyCodeResponse, build_strategy_code_response
from .strategies import (
    StrategyDateRangePayload,
    StrategyResponse,
    UpdateStrategyRequest,
    build_strategy_response,
)
from .trades import (
    TradeResponse,
    TradesPostRequest,
    TradesPostResponse,
    TradeSummaryResponse,
    build_trades_post_response,
)

__all__ = [
    "BacktestPostRequest",
    "BacktestPostResponse",
    "CreateBacktestRequest",
    "ResubmitBacktestRequest",
    "StrategyCodeResponse",
    "StrategyDateRangePayload",
    "StrategyResponse",
    "TradeResponse",
    "TradeSummaryResponse",
    "TradesPostRequest",
    "TradesPostResponse",
    "UpdateStrategyRequest",
    "build_backtest_post_response",
    "build_backtest_submission",
    "build_strategy_code_response",
    "build_strategy_response",
    "build_trades_post_response",
]
