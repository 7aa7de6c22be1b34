from .strategy_repository import InMemoryStrategyRepository

__all__ = [
    "InMemoryStrategyRepository",
]
