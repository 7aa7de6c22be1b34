from __future__ import annotations

import logging
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from apps.api.wiring import (
    BacktestSubmissionMetrics,
    build_backtest_api_module,
    build_strategy_store_module,
)
from stratlab.contexts.backtest.domain.value_objects import JobSubmissionResult
from stratlab.contexts.strategy.adapters.outbound import (
    InMemoryStrategyRepository,
    SystemStrategyClock,
)


def _config(tmp_path: Path) -> Path:
    path = tmp_path / "backtest_engine.yaml"
    path.write_text("version: 1\nbacktest_engine:\n  url: ws://engine:8080\n", encoding="utf-8")
    return path


def test_backtest_module_wires_three_routers_with_default_adapters(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """
    Verify module builds submission, code, and trades routers from YAML runtime config.

    Args:
        tmp_path: Pytest temporary directory.
        caplog: Pytest log capture fixture.
    Returns:
        None.
    Assumptions:
        Default connector and filesystem artifact store are used without overrides.
    Raises:
        AssertionError: If routers, config, or wiring log differ from contract.
    Side Effects:
        Writes one config file under `tmp_path`.
    """
    with caplog.at_level(logging.INFO):
        module = build_backtest_api_module(
            environ={"STRATLAB_ENV": "test", "STRATLAB_BACKTEST_ENGINE_CONFIG": str(_config(tmp_path))},
            store=build_strategy_store_module(),
            metrics_registry=CollectorRegistry(),
        )

    paths = [route.path for router in module.routers for route in router.routes]
    assert paths == ["/backtest", "/code", "/trades"]
    assert module.config.url == "ws://engine:8080"
    assert "component=backtest_wiring status=configured" in caplog.text


def test_strategy_store_module_defaults_to_in_memory_store() -> None:
    store = build_strategy_store_module()
    shared = InMemoryStrategyRepository()

    assert isinstance(store.repository, InMemoryStrategyRepository)
    assert isinstance(store.clock, SystemStrategyClock)
    assert build_strategy_store_module(repository=shared).repository is shared


def test_backtest_module_requires_store_and_registry(tmp_path: Path) -> None:
    environ = {"STRATLAB_BACKTEST_ENGINE_CONFIG": str(_config(tmp_path))}

    with pytest.raises(ValueError, match="requires store"):
        build_backtest_api_module(environ=environ, store=None, metrics_registry=CollectorRegistry())  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="requires metrics_registry"):
        build_backtest_api_module(
            environ=environ,
            store=build_strategy_store_module(),
            metrics_registry=None,  # type: ignore[arg-type]
        )


def test_submission_metrics_count_outcomes_by_failure_kind() -> None:
    registry = CollectorRegistry()
    metrics = BacktestSubmissionMetrics(registry=registry)
    hooks = metrics.build_hooks()

    hooks.on_attempt_finished(
        JobSubmissionResult.failed(strategy_id="s-1", kind="timeout", reason="late"),
        0.4,
    )
    hooks.on_probe_sent()

    assert registry.get_sample_value(
        "backtest_submissions_total",
        {"outcome": "failed", "failure_kind": "timeout"},
    ) == 1.0
    assert registry.get_sample_value("backtest_result_probes_total") == 1.0
    assert registry.get_sample_value(
        "backtest_submission_duration_seconds_count",
        {"outcome": "failed"},
    ) == 1.0
