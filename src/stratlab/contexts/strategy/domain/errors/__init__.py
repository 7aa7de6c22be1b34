from .strategy_errors import (
    StrategyDomainError,
    StrategyStatusTransitionError,
    StrategyStorageError,
    StrategyValidationError,
)

__all__ = [
    "StrategyDomainError",
    "StrategyStatusTransitionError",
    "StrategyStorageError",
    "StrategyValidationError",
]
