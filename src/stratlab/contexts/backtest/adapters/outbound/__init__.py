from .clients import WebsocketsEngineConnector
from .config import (
    BacktestEngineRuntimeConfig,
    load_backtest_engine_runtime_config,
    resolve_backtest_engine_config_path,
    resolve_engine_credential,
)
from .persistence import FilesystemSourceArtifactStore

__all__ = [
    "BacktestEngineRuntimeConfig",
    "FilesystemSourceArtifactStore",
    "WebsocketsEngineConnector",
    "load_backtest_engine_runtime_config",
    "resolve_backtest_engine_config_path",
    "resolve_engine_credential",
]
