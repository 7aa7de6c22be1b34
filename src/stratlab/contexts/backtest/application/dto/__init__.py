from .submit_backtest import (
    DEFAULT_SOURCE_LANGUAGE,
    BacktestSubmission,
    CreateStrategySubmission,
    ResubmitStrategySubmission,
    StrategyCodeResult,
    StrategyParams,
    SubmitBacktestResult,
)

__all__ = [
    "DEFAULT_SOURCE_LANGUAGE",
    "BacktestSubmission",
    "CreateStrategySubmission",
    "ResubmitStrategySubmission",
    "StrategyCodeResult",
    "StrategyParams",
    "SubmitBacktestResult",
]
