from .ports import StrategyClock, StrategyListOrder, StrategyRepository
from .use_cases import (
    DeleteStrategyUseCase,
    GetStrategyUseCase,
    ListUserStrategiesUseCase,
    UpdateStrategyUseCase,
)

__all__ = [
    "DeleteStrategyUseCase",
    "GetStrategyUseCase",
    "ListUserStrategiesUseCase",
    "StrategyClock",
    "StrategyListOrder",
    "StrategyRepository",
    "UpdateStrategyUseCase",
]
