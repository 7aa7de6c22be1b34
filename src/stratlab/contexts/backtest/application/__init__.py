from .dto import (
    DEFAULT_SOURCE_LANGUAGE,
    BacktestSubmission,
    CreateStrategySubmission,
    ResubmitStrategySubmission,
    StrategyCodeResult,
    StrategyParams,
    SubmitBacktestResult,
)
from .ports import EngineConnection, EngineConnector, SourceArtifactStore
from .services import (
    JobSubmissionClient,
    JobSubmissionHooks,
    SubmissionGuard,
    TradeLogFetcher,
    process_trade_log,
)
from .use_cases import (
    FetchStrategyTradesUseCase,
    GetStrategyCodeUseCase,
    SubmitBacktestUseCase,
)

__all__ = [
    "DEFAULT_SOURCE_LANGUAGE",
    "BacktestSubmission",
    "CreateStrategySubmission",
    "EngineConnection",
    "EngineConnector",
    "FetchStrategyTradesUseCase",
    "GetStrategyCodeUseCase",
    "JobSubmissionClient",
    "JobSubmissionHooks",
    "ResubmitStrategySubmission",
    "SourceArtifactStore",
    "StrategyCodeResult",
    "StrategyParams",
    "SubmissionGuard",
    "SubmitBacktestResult",
    "SubmitBacktestUseCase",
    "TradeLogFetcher",
    "process_trade_log",
]
