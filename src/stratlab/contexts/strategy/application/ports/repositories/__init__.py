from .strategy_repository import StrategyListOrder, StrategyRepository

__all__ = [
    "StrategyListOrder",
    "StrategyRepository",
]
