from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from apps.api.main.app import create_app


class _ProcessingEngine:
    class _Connection:
        async def send(self, payload: str) -> None:
            return None

        async def recv(self) -> str:
            return '{"status":"processing"}'

        async def close(self) -> None:
            return None

    async def open(self) -> _ProcessingEngine._Connection:
        return self._Connection()


def _environ(tmp_path: Path, **extra: str) -> dict[str, str]:
    config_path = tmp_path / "backtest_engine.yaml"
    config_path.write_text(
        "version: 1\n"
        "backtest_engine:\n"
        "  url: wss://engine.example:8443\n"
        f"  artifacts: {{root_dir: '{tmp_path.as_posix()}', extension: cpp}}\n",
        encoding="utf-8",
    )
    return {"STRATLAB_BACKTEST_ENGINE_CONFIG": str(config_path), **extra}


def test_create_app_registers_routes_and_loads_engine_config(tmp_path: Path) -> None:
    app = create_app(environ=_environ(tmp_path, STRATLAB_ENV="test"))

    paths = {route.path for route in app.routes}
    assert {"/backtest", "/code", "/trades", "/strategies", "/strategies/{strategy_id}"} <= paths
    assert app.state.backtest_engine_config.url == "wss://engine.example:8443"
    assert app.state.backtest_engine_config.artifacts.extension == "cpp"


def test_metrics_endpoint_exposes_submission_counters(tmp_path: Path) -> None:
    """
    Verify `/metrics` serves app-scoped Prometheus registry updated by submissions.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Each app instance owns its own registry, so counters start from zero.
    Raises:
        AssertionError: If metric families or samples are missing.
    Side Effects:
        Writes config and one artifact under `tmp_path`.
    """
    client = TestClient(
        create_app(environ=_environ(tmp_path, STRATLAB_ENV="test"), engine_connector=_ProcessingEngine())
    )
    response = client.post(
        "/backtest",
        json={
            "kind": "create",
            "name": "Momentum",
            "user_id": "user-1",
            "initial_equity": 500,
            "timeframe": "bnf.c5m",
            "date_range": {"from": "2024-03-01", "to": "2024-03-02"},
            "code": "// momentum",
        },
    )
    assert response.status_code == 200
    assert response.json()["file_path"].endswith(".cpp")

    metrics = client.get("/metrics/")

    assert metrics.status_code == 200
    assert 'backtest_submissions_total{outcome="accepted",failure_kind="none"} 1.0' in metrics.text
    assert "backtest_engine_frames_total 1.0" in metrics.text
    assert "backtest_result_probes_total 0.0" in metrics.text
    assert "backtest_submission_duration_seconds_count" in metrics.text


def test_two_apps_do_not_share_metrics_registry(tmp_path: Path) -> None:
    first = create_app(environ=_environ(tmp_path, STRATLAB_ENV="test"))
    second = create_app(environ=_environ(tmp_path, STRATLAB_ENV="test"))

    assert first.state.metrics_registry is not second.state.metrics_registry


def test_create_app_fails_fast_on_bad_runtime_configuration(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="STRATLAB_ENGINE_PASSWORD"):
        create_app(environ=_environ(tmp_path, STRATLAB_ENV="prod"))
    with pytest.raises(FileNotFoundError):
        create_app(
            environ={
                "STRATLAB_ENV": "test",
                "STRATLAB_BACKTEST_ENGINE_CONFIG": str(tmp_path / "missing.yaml"),
            }
        )
    with pytest.raises(ValueError, match="STRATLAB_ENGINE_STATUS_TIMEOUT_S"):
        create_app(environ=_environ(tmp_path, STRATLAB_ENGINE_STATUS_TIMEOUT_S="0"))

    app = create_app(
        environ=_environ(tmp_path, STRATLAB_ENV="prod", STRATLAB_ENGINE_PASSWORD="pw")
    )
    assert app.title == "Stratlab API"
