from .backtest_errors import (
    BacktestDomainError,
    BacktestSubmissionBusyError,
    BacktestValidationError,
    EngineConnectionClosedError,
    EngineError,
    EngineProtocolError,
    EngineRejectedError,
    EngineTimeoutError,
    EngineTransportError,
    SourceArtifactError,
)

__all__ = [
    "BacktestDomainError",
    "BacktestSubmissionBusyError",
    "BacktestValidationError",
    "EngineConnectionClosedError",
    "EngineError",
    "EngineProtocolError",
    "EngineRejectedError",
    "EngineTimeoutError",
    "EngineTransportError",
    "SourceArtifactError",
]
