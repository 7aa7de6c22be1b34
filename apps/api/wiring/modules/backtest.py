"""
Composition helpers for backtest submission, strategy code, and trade ledger API module.

Docs:
  - docs/architecture/backtest/backtest-http-job-handler-v1.md
  - docs/architecture/backtest/backtest-engine-runtime-config-v1.md
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import APIRouter
from prometheus_client import CollectorRegistry, Counter, Histogram

from apps.api.routes import (
    build_backtests_router,
    build_strategy_code_router,
    build_trades_router,
)
from apps.api.wiring.modules.strategy import StrategyStoreModule
from stratlab.contexts.backtest.adapters.outbound import (
    BacktestEngineRuntimeConfig,
    FilesystemSourceArtifactStore,
    WebsocketsEngineConnector,
    load_backtest_engine_runtime_config,
    resolve_backtest_engine_config_path,
    resolve_engine_credential,
)
from stratlab.contexts.backtest.application import (
    EngineConnector,
    FetchStrategyTradesUseCase,
    GetStrategyCodeUseCase,
    JobSubmissionClient,
    JobSubmissionHooks,
    SourceArtifactStore,
    SubmissionGuard,
    SubmitBacktestUseCase,
    TradeLogFetcher,
)
from stratlab.contexts.backtest.domain.value_objects import JobSubmissionResult

log = logging.getLogger(__name__)


class BacktestSubmissionMetrics:
    """
    Prometheus metrics bundle for engine submission attempts.
    """

    def __init__(self, *, registry: CollectorRegistry) -> None:
        """
        Create submission metric objects in explicit registry.

        Parameters:
        - registry: Prometheus registry owned by one API app instance.

        Returns:
        - None.

        Assumptions/Invariants:
        - One metrics bundle per registry.

        Errors/Exceptions:
        - May raise registration errors on duplicate metric names.

        Side effects:
        - Registers metrics in provided registry.
        """
        self.submissions_total = Counter(
            "backtest_submissions_total",
            "Finished engine submission attempts grouped by outcome and failure kind",
            labelnames=("outcome", "failure_kind"),
            registry=registry,
        )
        self.submission_duration_seconds = Histogram(
            "backtest_submission_duration_seconds",
            "Engine submission attempt duration in seconds",
            labelnames=("outcome",),
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 15.0, 30.0, 60.0),
            registry=registry,
        )
        self.engine_frames_total = Counter(
            "backtest_engine_frames_total",
            "Inbound engine frames received during submission attempts",
            registry=registry,
        )
        self.result_probes_total = Counter(
            "backtest_result_probes_total",
            "Result probes sent after engine acknowledgement",
            registry=registry,
        )

    def observe_attempt(self, result: JobSubmissionResult, duration_s: float) -> None:
        outcome = "accepted" if result.accepted else "failed"
        failure_kind = result.failure.kind if result.failure is not None else "none"
        self.submissions_total.labels(outcome=outcome, failure_kind=failure_kind).inc()
        self.submission_duration_seconds.labels(outcome=outcome).observe(duration_s)

    def build_hooks(self) -> JobSubmissionHooks:
        """Bind metric updates to submission client hooks."""
        return JobSubmissionHooks(
            on_attempt_finished=self.observe_attempt,
            on_frame_received=self.engine_frames_total.inc,
            on_probe_sent=self.result_probes_total.inc,
        )


@dataclass(frozen=True, slots=True)
class BacktestApiModule:
    """
    Wired backtest API module: routers plus runtime config and metrics for app factory.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - apps/api/main/app.py
    """

    routers: tuple[APIRouter, ...]
    config: BacktestEngineRuntimeConfig
    metrics: BacktestSubmissionMetrics


def build_backtest_api_module(
    *,
    environ: Mapping[str, str],
    store: StrategyStoreModule,
    metrics_registry: CollectorRegistry,
    engine_connector: EngineConnector | None = None,
    artifact_store: SourceArtifactStore | None = None,
) -> BacktestApiModule:
    """
    Build fully wired backtest routers with fail-fast runtime configuration.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
      - docs/architecture/backtest/backtest-engine-runtime-config-v1.md
    Related:
      - apps/api/routes/backtests.py
      - apps/api/routes/strategy_code.py
      - apps/api/routes/trades.py
      - src/stratlab/contexts/backtest/adapters/outbound/config/
        backtest_engine_runtime_config.py

    Args:
        environ: Runtime environment mapping.
        store: Shared Strategy Record store dependencies.
        metrics_registry: Prometheus registry of the app instance.
        engine_connector: Optional engine connector override (tests).
        artifact_store: Optional source artifact store override (tests).
    Returns:
        BacktestApiModule: Routers, loaded config, and metrics bundle.
    Assumptions:
        Config and credential are validated on startup (fail-fast).
    Raises:
        FileNotFoundError: If `backtest_engine.yaml` cannot be resolved.
        ValueError: If config, env overrides, or prod credential are invalid.
    Side Effects:
        Reads one YAML config file and logs resolved engine endpoint.
    """
    if store is None:  # type: ignore[truthy-bool]
        raise ValueError("build_backtest_api_module requires store")
    if metrics_registry is None:  # type: ignore[truthy-bool]
        raise ValueError("build_backtest_api_module requires metrics_registry")

    config_path = resolve_backtest_engine_config_path(environ=environ)
    config = load_backtest_engine_runtime_config(config_path, environ=environ)
    credential = resolve_engine_credential(config=config, environ=environ)

    connector: EngineConnector = (
        engine_connector
        if engine_connector is not None
        else WebsocketsEngineConnector(url=config.url, verify_tls=config.verify_tls)
    )
    effective_artifact_store: SourceArtifactStore = (
        artifact_store
        if artifact_store is not None
        else FilesystemSourceArtifactStore(
            root_dir=config.artifacts.root_dir,
            extension=config.artifacts.extension,
        )
    )
    metrics = BacktestSubmissionMetrics(registry=metrics_registry)
    client = JobSubmissionClient(
        connector=connector,
        artifact_store=effective_artifact_store,
        timeouts=config.timeouts,
        strict_status_frames=config.frames.strict_status_frames,
        hooks=metrics.build_hooks(),
    )
    log.info(
        "component=backtest_wiring status=configured config=%s url=%s verify_tls=%s "
        "strict_status_frames=%s artifacts_root=%s",
        config_path,
        config.url,
        config.verify_tls,
        config.frames.strict_status_frames,
        config.artifacts.root_dir,
    )

    routers = (
        build_backtests_router(
            submit_use_case=SubmitBacktestUseCase(
                repository=store.repository,
                clock=store.clock,
                client=client,
                guard=SubmissionGuard(),
                credential=credential,
            )
        ),
        build_strategy_code_router(
            code_use_case=GetStrategyCodeUseCase(
                repository=store.repository,
                artifact_store=effective_artifact_store,
            )
        ),
        build_trades_router(
            trades_use_case=FetchStrategyTradesUseCase(
                repository=store.repository,
                clock=store.clock,
                fetcher=TradeLogFetcher(
                    connector=connector,
                    result_timeout_s=config.timeouts.result_timeout_s,
                ),
                credential=credential,
            )
        ),
    )
    return BacktestApiModule(routers=routers, config=config, metrics=metrics)
