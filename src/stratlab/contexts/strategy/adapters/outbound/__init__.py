from .persistence import InMemoryStrategyRepository
from .time import SystemStrategyClock

__all__ = [
    "InMemoryStrategyRepository",
    "SystemStrategyClock",
]
