from .backtests import build_backtests_router
from .strategies import build_strategies_router
from .strategy_code import build_strategy_code_router
from .trades import build_trades_router

__all__ = [
    "build_backtests_router",
    "build_strategies_router",
    "build_strategy_code_router",
    "build_trades_router",
]
