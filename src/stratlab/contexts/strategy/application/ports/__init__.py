from .clock import StrategyClock
from .repositories import StrategyListOrder, StrategyRepository

__all__ = [
    "StrategyClock",
    "StrategyListOrder",
    "StrategyRepository",
]
