from .backtest_engine_runtime_config import (
    BacktestEngineArtifactsConfig,
    BacktestEngineFramesConfig,
    BacktestEngineRuntimeConfig,
    load_backtest_engine_runtime_config,
    resolve_backtest_engine_config_path,
    resolve_engine_credential,
    resolve_env_name,
)
from .scalar_env_overrides import (
    parse_bool_literal,
    resolve_bool_override,
    resolve_positive_float_override,
    resolve_str_override,
)

__all__ = [
    "BacktestEngineArtifactsConfig",
    "BacktestEngineFramesConfig",
    "BacktestEngineRuntimeConfig",
    "load_backtest_engine_runtime_config",
    "parse_bool_literal",
    "resolve_backtest_engine_config_path",
    "resolve_bool_override",
    "resolve_engine_credential",
    "resolve_env_name",
    "resolve_positive_float_override",
    "resolve_str_override",
]
