from .modules import (
    BacktestApiModule,
    BacktestSubmissionMetrics,
    StrategyStoreModule,
    build_backtest_api_module,
    build_strategy_router,
    build_strategy_store_module,
)

__all__ = [
    "BacktestApiModule",
    "BacktestSubmissionMetrics",
    "StrategyStoreModule",
    "build_backtest_api_module",
    "build_strategy_router",
    "build_strategy_store_module",
]
