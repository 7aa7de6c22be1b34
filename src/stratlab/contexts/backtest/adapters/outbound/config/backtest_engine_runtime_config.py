from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from stratlab.contexts.backtest.adapters.outbound.persistence.filesystem import (
    DEFAULT_ARTIFACT_EXTENSION,
)
from stratlab.contexts.backtest.domain.value_objects import EngineTimeouts
from stratlab.contexts.backtest.domain.value_objects.engine_timeouts import (
    CONNECT_TIMEOUT_S_DEFAULT,
    RESULT_TIMEOUT_S_DEFAULT,
    SETTLE_DELAY_S_DEFAULT,
    STATUS_TIMEOUT_S_DEFAULT,
)

from .scalar_env_overrides import (
    resolve_bool_override,
    resolve_positive_float_override,
    resolve_str_override,
)

log = logging.getLogger(__name__)

_ENV_NAME_KEY = "STRATLAB_ENV"
_ENGINE_CONFIG_PATH_KEY = "STRATLAB_BACKTEST_ENGINE_CONFIG"
_ALLOWED_ENVS = ("dev", "prod", "test")

_ENGINE_URL_ENV_KEY = "STRATLAB_ENGINE_URL"
_ENGINE_CONNECT_TIMEOUT_ENV_KEY = "STRATLAB_ENGINE_CONNECT_TIMEOUT_S"
_ENGINE_STATUS_TIMEOUT_ENV_KEY = "STRATLAB_ENGINE_STATUS_TIMEOUT_S"
_ENGINE_SETTLE_DELAY_ENV_KEY = "STRATLAB_ENGINE_SETTLE_DELAY_S"
_ENGINE_RESULT_TIMEOUT_ENV_KEY = "STRATLAB_ENGINE_RESULT_TIMEOUT_S"
_ENGINE_STRICT_STATUS_FRAMES_ENV_KEY = "STRATLAB_ENGINE_STRICT_STATUS_FRAMES"
_CODE_ROOT_ENV_KEY = "STRATLAB_CODE_ROOT"

DEFAULT_ENGINE_URL = "wss://192.168.88.4:8080"
DEFAULT_CREDENTIAL_ENV = "STRATLAB_ENGINE_PASSWORD"
DEFAULT_ARTIFACT_ROOT = "."


@dataclass(frozen=True, slots=True)
class BacktestEngineFramesConfig:
    """
    BacktestEngineFramesConfig — interpretation policy for inbound engine frames.

    `strict_status_frames=False` keeps tolerant handling of non-JSON acknowledgements.
    """

    strict_status_frames: bool


@dataclass(frozen=True, slots=True)
class BacktestEngineArtifactsConfig:
    """
    BacktestEngineArtifactsConfig — source artifact location settings.

    Docs:
      - docs/architecture/backtest/backtest-source-artifacts-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/persistence/filesystem/
        source_artifact_store.py
    """

    root_dir: Path
    extension: str

    def __post_init__(self) -> None:
        normalized_extension = self.extension.strip().lstrip(".")
        if not normalized_extension:
            raise ValueError("backtest_engine.artifacts.extension must be non-empty")
        object.__setattr__(self, "extension", normalized_extension)
        object.__setattr__(self, "root_dir", Path(self.root_dir))


@dataclass(frozen=True, slots=True)
class BacktestEngineRuntimeConfig:
    """
    BacktestEngineRuntimeConfig — top-level runtime config of the execution engine client.

    Docs:
      - docs/architecture/backtest/backtest-engine-runtime-config-v1.md
    Related:
      - configs/dev/backtest_engine.yaml
      - apps/api/wiring/modules/backtest.py
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
    """

    version: int
    url: str
    verify_tls: bool
    credential_env: str | None
    timeouts: EngineTimeouts
    frames: BacktestEngineFramesConfig
    artifacts: BacktestEngineArtifactsConfig

    def __post_init__(self) -> None:
        """
        Validate top-level config invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Only schema version `1` is supported.
        Raises:
            ValueError: If version or engine URL is invalid.
        Side Effects:
            None.
        """
        if self.version != 1:
            raise ValueError(f"backtest engine config version must be 1, got {self.version}")
        if not self.url.startswith(("ws://", "wss://")):
            raise ValueError(
                f"backtest_engine.url must start with ws:// or wss://, got {self.url!r}"
            )


def resolve_backtest_engine_config_path(*, environ: Mapping[str, str]) -> Path:
    """
    Resolve engine runtime config path using env/fallback precedence.

    Args:
        environ: Runtime environment mapping.
    Returns:
        Path: Resolved path to runtime config.
    Assumptions:
        Precedence is `STRATLAB_BACKTEST_ENGINE_CONFIG` > `configs/<env>/backtest_engine.yaml`.
    Raises:
        ValueError: If `STRATLAB_ENV` value is invalid.
    Side Effects:
        None.
    """
    override_path = environ.get(_ENGINE_CONFIG_PATH_KEY, "").strip()
    if override_path:
        return Path(override_path)

    env_name = resolve_env_name(environ=environ)
    return Path("configs") / env_name / "backtest_engine.yaml"


def load_backtest_engine_runtime_config(
    path: str | Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> BacktestEngineRuntimeConfig:
    """
    Load and validate engine runtime YAML config with whitelisted scalar env overrides.

    Docs:
      - docs/architecture/backtest/backtest-engine-runtime-config-v1.md
    Related:
      - configs/dev/backtest_engine.yaml
      - apps/api/main/app.py

    Args:
        path: Path to `backtest_engine.yaml`.
        environ: Optional runtime environment mapping used for scalar overrides.
    Returns:
        BacktestEngineRuntimeConfig: Parsed and validated runtime config.
    Assumptions:
        YAML payload contains top-level `version` and `backtest_engine` mapping.
    Raises:
        FileNotFoundError: If config path does not exist.
        ValueError: If YAML structure, values, or scalar env overrides are invalid.
    Side Effects:
        Reads one UTF-8 YAML file from filesystem.
    """
    effective_environ = os.environ if environ is None else environ
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"backtest engine config not found: {config_path}")

    payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError("backtest engine config must be mapping at top-level")

    version = _get_int(payload, "version", required=True)
    engine_map = _get_mapping(payload, "backtest_engine", required=True)
    timeouts_map = _get_mapping(engine_map, "timeouts", required=False)
    frames_map = _get_mapping(engine_map, "frames", required=False)
    artifacts_map = _get_mapping(engine_map, "artifacts", required=False)

    timeouts = EngineTimeouts(
        connect_timeout_s=resolve_positive_float_override(
            environ=effective_environ,
            key=_ENGINE_CONNECT_TIMEOUT_ENV_KEY,
            default=_get_float_with_default(
                timeouts_map,
                "connect_timeout_s",
                default=CONNECT_TIMEOUT_S_DEFAULT,
            ),
        ),
        status_timeout_s=resolve_positive_float_override(
            environ=effective_environ,
            key=_ENGINE_STATUS_TIMEOUT_ENV_KEY,
            default=_get_float_with_default(
                timeouts_map,
                "status_timeout_s",
                default=STATUS_TIMEOUT_S_DEFAULT,
            ),
        ),
        settle_delay_s=resolve_positive_float_override(
            environ=effective_environ,
            key=_ENGINE_SETTLE_DELAY_ENV_KEY,
            default=_get_float_with_default(
                timeouts_map,
                "settle_delay_s",
                default=SETTLE_DELAY_S_DEFAULT,
            ),
        ),
        result_timeout_s=resolve_positive_float_override(
            environ=effective_environ,
            key=_ENGINE_RESULT_TIMEOUT_ENV_KEY,
            default=_get_float_with_default(
                timeouts_map,
                "result_timeout_s",
                default=RESULT_TIMEOUT_S_DEFAULT,
            ),
        ),
    )

    return BacktestEngineRuntimeConfig(
        version=version,
        url=resolve_str_override(
            environ=effective_environ,
            key=_ENGINE_URL_ENV_KEY,
            default=_get_str_with_default(engine_map, "url", default=DEFAULT_ENGINE_URL),
        ),
        verify_tls=_get_bool_with_default(engine_map, "verify_tls", default=False),
        credential_env=_get_optional_str_with_default(
            engine_map,
            "credential_env",
            default=DEFAULT_CREDENTIAL_ENV,
        ),
        timeouts=timeouts,
        frames=BacktestEngineFramesConfig(
            strict_status_frames=resolve_bool_override(
                environ=effective_environ,
                key=_ENGINE_STRICT_STATUS_FRAMES_ENV_KEY,
                default=_get_bool_with_default(frames_map, "strict_status_frames", default=False),
            ),
        ),
        artifacts=BacktestEngineArtifactsConfig(
            root_dir=Path(
                resolve_str_override(
                    environ=effective_environ,
                    key=_CODE_ROOT_ENV_KEY,
                    default=_get_str_with_default(
                        artifacts_map,
                        "root_dir",
                        default=DEFAULT_ARTIFACT_ROOT,
                    ),
                )
            ),
            extension=_get_str_with_default(
                artifacts_map,
                "extension",
                default=DEFAULT_ARTIFACT_EXTENSION,
            ),
        ),
    )


def resolve_engine_credential(
    *,
    config: BacktestEngineRuntimeConfig,
    environ: Mapping[str, str],
) -> str:
    """
    Read engine credential from environment variable named by `credential_env`.

    Args:
        config: Loaded engine runtime config.
        environ: Runtime environment mapping.
    Returns:
        str: Credential value, empty outside prod when not configured.
    Assumptions:
        Credential is never stored in YAML; prod deployments must provide it.
    Raises:
        ValueError: If credential is missing while `STRATLAB_ENV=prod`.
    Side Effects:
        Logs warning when empty credential is used.
    """
    credential = ""
    if config.credential_env is not None:
        credential = environ.get(config.credential_env, "")
    if credential:
        return credential

    env_name = resolve_env_name(environ=environ)
    if env_name == "prod":
        raise ValueError(
            f"engine credential is required in prod: set {config.credential_env or 'credential_env'}"
        )
    log.warning(
        "component=backtest_engine_config status=credential_missing env=%s credential_env=%s",
        env_name,
        config.credential_env,
    )
    return ""


def resolve_env_name(*, environ: Mapping[str, str]) -> str:
    """
    Resolve normalized runtime environment name.

    Args:
        environ: Runtime environment mapping.
    Returns:
        str: One of `dev`, `prod`, or `test`.
    Assumptions:
        Missing `STRATLAB_ENV` defaults to `dev`.
    Raises:
        ValueError: If value is outside allowed environment literals.
    Side Effects:
        None.
    """
    raw_env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if raw_env_name not in _ALLOWED_ENVS:
        raise ValueError(
            f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {raw_env_name!r}"
        )
    return raw_env_name


def _get_mapping(data: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """
    Read nested mapping value from config payload.

    Args:
        data: Source mapping.
        key: Mapping key name.
        required: Whether key is required.
    Returns:
        Mapping[str, Any]: Nested mapping or empty mapping for optional missing key.
    Assumptions:
        Optional missing sections are represented as empty mapping.
    Raises:
        ValueError: If required key is missing or value is not mapping.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"expected mapping at key '{key}', got {type(value).__name__}")
    return value


def _get_int(data: Mapping[str, Any], key: str, *, required: bool) -> int:
    """Read integer config value, rejecting bool values."""
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected int at key '{key}', got {type(value).__name__}")
    return value


def _get_float_with_default(data: Mapping[str, Any], key: str, *, default: float) -> float:
    """
    Read optional float config value with explicit default.

    Args:
        data: Source mapping.
        key: Float key name.
        default: Value used when key is absent.
    Returns:
        float: Parsed float value.
    Assumptions:
        Integer values are accepted and converted to float.
    Raises:
        ValueError: If present value is not numeric.
    Side Effects:
        None.
    """
    if key not in data:
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected float at key '{key}', got {type(value).__name__}")
    return float(value)


def _get_str_with_default(data: Mapping[str, Any], key: str, *, default: str) -> str:
    """Read optional non-empty string config value with explicit default."""
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"expected string at key '{key}', got {type(value).__name__}")
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"key '{key}' must be non-empty")
    return normalized


def _get_optional_str_with_default(
    data: Mapping[str, Any],
    key: str,
    *,
    default: str | None,
) -> str | None:
    """
    Read optional nullable string config value with explicit default.

    Args:
        data: Source mapping.
        key: Nullable string key name.
        default: Value used when key is absent.
    Returns:
        str | None: Parsed string value or None.
    Assumptions:
        Empty strings are normalized to None.
    Raises:
        ValueError: If present value is not string or null.
    Side Effects:
        None.
    """
    if key not in data:
        return default
    value = data[key]
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected string or null at key '{key}', got {type(value).__name__}")
    normalized = value.strip()
    if not normalized:
        return None
    return normalized


def _get_bool_with_default(data: Mapping[str, Any], key: str, *, default: bool) -> bool:
    """Read optional boolean config value; only real YAML booleans are accepted."""
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, bool):
        raise ValueError(f"expected bool at key '{key}', got {type(value).__name__}")
    return value
