"""
FastAPI application factory for Stratlab API.
"""

from __future__ import annotations

import os
from typing import Mapping

from fastapi import FastAPI
from prometheus_client import CollectorRegistry, make_asgi_app

from apps.api.common import register_api_error_handlers
from apps.api.wiring.modules import (
    build_backtest_api_module,
    build_strategy_router,
    build_strategy_store_module,
)
from stratlab.contexts.backtest.application import EngineConnector, SourceArtifactStore
from stratlab.contexts.strategy.application.ports import StrategyClock, StrategyRepository


def create_app(
    *,
    environ: Mapping[str, str] | None = None,
    engine_connector: EngineConnector | None = None,
    artifact_store: SourceArtifactStore | None = None,
    repository: StrategyRepository | None = None,
    clock: StrategyClock | None = None,
) -> FastAPI:
    """
    Build FastAPI app with strategy store, backtest submission, and metrics wired at startup.

    Docs: docs/architecture/backtest/backtest-http-job-handler-v1.md,
      docs/architecture/strategy/strategy-record-store-v1.md,
      docs/architecture/backtest/backtest-engine-runtime-config-v1.md,
      docs/architecture/api/api-errors-v1.md
    Related: apps.api.routes.backtests,
      apps.api.routes.strategies,
      apps.api.wiring.modules.backtest,
      apps.api.wiring.modules.strategy

    Args:
        environ: Optional environment mapping override.
        engine_connector: Optional engine connector override (tests).
        artifact_store: Optional source artifact store override (tests).
        repository: Optional Strategy Record store override.
        clock: Optional strategy clock override.
    Returns:
        FastAPI: Application instance with registered routers and `/metrics` endpoint.
    Assumptions:
        Modules wiring performs fail-fast validation before first request.
        One Strategy Record store instance is shared by all routers of the app.
    Raises:
        FileNotFoundError: If engine runtime config path is missing.
        ValueError: If config parsing/validation or prod credential resolution fails.
    Side Effects:
        Reads engine runtime YAML and creates one app-scoped Prometheus registry.
    """
    effective_environ = os.environ if environ is None else environ
    store = build_strategy_store_module(repository=repository, clock=clock)
    metrics_registry = CollectorRegistry()
    backtest_module = build_backtest_api_module(
        environ=effective_environ,
        store=store,
        metrics_registry=metrics_registry,
        engine_connector=engine_connector,
        artifact_store=artifact_store,
    )

    app = FastAPI(
        title="Stratlab API",
        version="1.0.0",
    )
    register_api_error_handlers(app=app)
    for router in backtest_module.routers:
        app.include_router(router)
    app.include_router(build_strategy_router(store=store))
    app.mount("/metrics", make_asgi_app(registry=metrics_registry))
    app.state.backtest_engine_config = backtest_module.config
    app.state.metrics_registry = metrics_registry
    return app


app = create_app()
