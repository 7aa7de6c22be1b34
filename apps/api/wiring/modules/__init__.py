from .backtest import BacktestApiModule, BacktestSubmissionMetrics, build_backtest_api_module
from .strategy import StrategyStoreModule, build_strategy_router, build_strategy_store_module

__all__ = [
    "BacktestApiModule",
    "BacktestSubmissionMetrics",
    "StrategyStoreModule",
    "build_backtest_api_module",
    "build_strategy_router",
    "build_strategy_store_module",
]
