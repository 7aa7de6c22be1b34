from .in_memory import InMemoryStrategyRepository

__all__ = [
    "InMemoryStrategyRepository",
]
