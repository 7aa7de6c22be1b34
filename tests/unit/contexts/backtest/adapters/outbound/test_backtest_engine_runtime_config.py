from __future__ import annotations

import logging
from pathlib import Path

import pytest

from stratlab.contexts.backtest.adapters.outbound.config import (
    load_backtest_engine_runtime_config,
    parse_bool_literal,
    resolve_backtest_engine_config_path,
    resolve_engine_credential,
)

_FULL_CONFIG = """
version: 1
backtest_engine:
  url: "wss://engine.local:8080"
  verify_tls: true
  credential_env: "ENGINE_SECRET"
  timeouts:
    connect_timeout_s: 3
    status_timeout_s: 4.5
    settle_delay_s: 1
    result_timeout_s: 9
  frames:
    strict_status_frames: true
  artifacts:
    root_dir: "/srv/stratlab"
    extension: ".cpp"
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "backtest_engine.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_reads_every_section(tmp_path: Path) -> None:
    """
    Verify YAML fields are parsed into typed config with normalized extension.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Integer YAML timeouts are converted to float seconds.
    Raises:
        AssertionError: If parsed config differs from YAML values.
    Side Effects:
        Writes one temporary YAML file.
    """
    config = load_backtest_engine_runtime_config(_write(tmp_path, _FULL_CONFIG), environ={})

    assert config.url == "wss://engine.local:8080"
    assert config.verify_tls is True
    assert config.credential_env == "ENGINE_SECRET"
    assert config.timeouts.connect_timeout_s == 3.0
    assert config.timeouts.status_timeout_s == 4.5
    assert config.timeouts.settle_delay_s == 1.0
    assert config.timeouts.result_timeout_s == 9.0
    assert config.frames.strict_status_frames is True
    assert config.artifacts.root_dir == Path("/srv/stratlab")
    assert config.artifacts.extension == "cpp"


def test_load_config_applies_defaults_for_optional_sections(tmp_path: Path) -> None:
    config = load_backtest_engine_runtime_config(
        _write(tmp_path, "version: 1\nbacktest_engine: {}\n"),
        environ={},
    )

    assert config.url == "wss://192.168.88.4:8080"
    assert config.verify_tls is False
    assert config.credential_env == "STRATLAB_ENGINE_PASSWORD"
    assert (
        config.timeouts.connect_timeout_s,
        config.timeouts.status_timeout_s,
        config.timeouts.settle_delay_s,
        config.timeouts.result_timeout_s,
    ) == (10.0, 15.0, 5.0, 15.0)
    assert config.frames.strict_status_frames is False
    assert config.artifacts.root_dir == Path(".")
    assert config.artifacts.extension == "h"


def test_env_overrides_take_precedence_over_yaml(tmp_path: Path) -> None:
    config = load_backtest_engine_runtime_config(
        _write(tmp_path, _FULL_CONFIG),
        environ={
            "STRATLAB_ENGINE_URL": "ws://127.0.0.1:9000",
            "STRATLAB_ENGINE_CONNECT_TIMEOUT_S": "0.5",
            "STRATLAB_ENGINE_STATUS_TIMEOUT_S": "2",
            "STRATLAB_ENGINE_SETTLE_DELAY_S": "0.25",
            "STRATLAB_ENGINE_RESULT_TIMEOUT_S": "30",
            "STRATLAB_ENGINE_STRICT_STATUS_FRAMES": "off",
            "STRATLAB_CODE_ROOT": "/tmp/artifacts",
        },
    )

    assert config.url == "ws://127.0.0.1:9000"
    assert config.timeouts.connect_timeout_s == 0.5
    assert config.timeouts.status_timeout_s == 2.0
    assert config.timeouts.settle_delay_s == 0.25
    assert config.timeouts.result_timeout_s == 30.0
    assert config.frames.strict_status_frames is False
    assert config.artifacts.root_dir == Path("/tmp/artifacts")


@pytest.mark.parametrize(
    ("text", "environ", "message"),
    [
        ("version: 2\nbacktest_engine: {}\n", {}, "version must be 1"),
        ("version: 1\n", {}, "missing required key: backtest_engine"),
        ("version: 1\nbacktest_engine:\n  url: http://engine\n", {}, "ws:// or wss://"),
        (
            "version: 1\nbacktest_engine:\n  timeouts:\n    status_timeout_s: fast\n",
            {},
            "expected float",
        ),
        ("version: 1\nbacktest_engine: {}\n", {"STRATLAB_ENGINE_CONNECT_TIMEOUT_S": "-1"}, "> 0"),
        ("version: 1\nbacktest_engine: {}\n", {"STRATLAB_ENGINE_RESULT_TIMEOUT_S": "inf"}, "> 0"),
        (
            "version: 1\nbacktest_engine: {}\n",
            {"STRATLAB_ENGINE_STRICT_STATUS_FRAMES": "maybe"},
            "boolean literal",
        ),
        ("- just\n- a list\n", {}, "mapping at top-level"),
    ],
)
def test_invalid_config_fails_fast(
    tmp_path: Path,
    text: str,
    environ: dict[str, str],
    message: str,
) -> None:
    with pytest.raises(ValueError, match=message):
        load_backtest_engine_runtime_config(_write(tmp_path, text), environ=environ)


def test_missing_config_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_backtest_engine_runtime_config(tmp_path / "missing.yaml", environ={})


def test_config_path_resolution_prefers_explicit_override() -> None:
    assert resolve_backtest_engine_config_path(environ={}) == Path("configs/dev/backtest_engine.yaml")
    assert resolve_backtest_engine_config_path(environ={"STRATLAB_ENV": "PROD"}) == Path(
        "configs/prod/backtest_engine.yaml"
    )
    assert resolve_backtest_engine_config_path(
        environ={"STRATLAB_ENV": "prod", "STRATLAB_BACKTEST_ENGINE_CONFIG": "/etc/engine.yaml"}
    ) == Path("/etc/engine.yaml")
    with pytest.raises(ValueError, match="STRATLAB_ENV"):
        resolve_backtest_engine_config_path(environ={"STRATLAB_ENV": "staging"})


def test_engine_credential_is_required_in_prod_only(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """
    Verify credential resolution from env and prod-only fail-fast policy.

    Args:
        tmp_path: Pytest temporary directory.
        caplog: Pytest log capture fixture.
    Returns:
        None.
    Assumptions:
        Credential env var name comes from `credential_env`.
    Raises:
        AssertionError: If credential policy differs from contract.
    Side Effects:
        Writes one temporary YAML file.
    """
    config = load_backtest_engine_runtime_config(_write(tmp_path, _FULL_CONFIG), environ={})

    assert resolve_engine_credential(config=config, environ={"ENGINE_SECRET": "pw"}) == "pw"
    with caplog.at_level(logging.WARNING):
        assert resolve_engine_credential(config=config, environ={"STRATLAB_ENV": "test"}) == ""
    assert "status=credential_missing" in caplog.text
    with pytest.raises(ValueError, match="ENGINE_SECRET"):
        resolve_engine_credential(config=config, environ={"STRATLAB_ENV": "prod"})


@pytest.mark.parametrize(("raw", "expected"), [("1", True), (" YES ", True), ("off", False)])
def test_parse_bool_literal_accepts_strict_literals(raw: str, expected: bool) -> None:
    assert parse_bool_literal(raw_value=raw, key="FLAG") is expected


def test_repository_configs_load_for_every_environment() -> None:
    root = Path(__file__).resolve().parents[6]

    for env_name in ("dev", "test", "prod"):
        config = load_backtest_engine_runtime_config(
            root / "configs" / env_name / "backtest_engine.yaml",
            environ={},
        )

        assert config.version == 1
        assert config.credential_env == "STRATLAB_ENGINE_PASSWORD"
