from .delete_strategy import DeleteStrategyUseCase
from .errors import (
    map_strategy_exception,
    strategy_conflict,
    strategy_forbidden,
    strategy_not_found,
    validation_error,
)
from .get_strategy import GetStrategyUseCase
from .list_user_strategies import ListUserStrategiesUseCase
from .update_strategy import UpdateStrategyUseCase

__all__ = [
    "DeleteStrategyUseCase",
    "GetStrategyUseCase",
    "ListUserStrategiesUseCase",
    "UpdateStrategyUseCase",
    "map_strategy_exception",
    "strategy_conflict",
    "strategy_forbidden",
    "strategy_not_found",
    "validation_error",
]
