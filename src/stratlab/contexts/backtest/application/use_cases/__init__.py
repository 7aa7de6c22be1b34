from .errors import (
    backtest_busy,
    backtest_submission_failed,
    engine_unavailable,
    map_backtest_exception,
    validation_error,
)
from .fetch_strategy_trades import FetchStrategyTradesUseCase
from .get_strategy_code import NO_CODE_MESSAGE, GetStrategyCodeUseCase
from .submit_backtest import SubmitBacktestUseCase

__all__ = [
    "NO_CODE_MESSAGE",
    "FetchStrategyTradesUseCase",
    "GetStrategyCodeUseCase",
    "SubmitBacktestUseCase",
    "backtest_busy",
    "backtest_submission_failed",
    "engine_unavailable",
    "map_backtest_exception",
    "validation_error",
]
