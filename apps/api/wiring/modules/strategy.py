"""
Composition helpers for Strategy Record API module.

Docs:
  - docs/architecture/strategy/strategy-record-store-v1.md
  - docs/architecture/api/api-errors-v1.md
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import APIRouter

from apps.api.routes import build_strategies_router
from stratlab.contexts.strategy.adapters.outbound import (
    InMemoryStrategyRepository,
    SystemStrategyClock,
)
from stratlab.contexts.strategy.application import (
    DeleteStrategyUseCase,
    GetStrategyUseCase,
    ListUserStrategiesUseCase,
    StrategyClock,
    StrategyRepository,
    UpdateStrategyUseCase,
)


@dataclass(frozen=True, slots=True)
class StrategyStoreModule:
    """
    Shared Strategy Record store dependencies used by strategy and backtest API modules.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - apps/api/wiring/modules/backtest.py
      - apps/api/main/app.py
    """

    repository: StrategyRepository
    clock: StrategyClock


def build_strategy_store_module(
    *,
    repository: StrategyRepository | None = None,
    clock: StrategyClock | None = None,
) -> StrategyStoreModule:
    """
    Build process-local Strategy Record store with optional injected adapters.

    Args:
        repository: Optional repository override (tests).
        clock: Optional clock override (tests).
    Returns:
        StrategyStoreModule: Store dependencies.
    Assumptions:
        Default store is in-memory; records do not survive process restart.
    Raises:
        None.
    Side Effects:
        None.
    """
    return StrategyStoreModule(
        repository=repository if repository is not None else InMemoryStrategyRepository(),
        clock=clock if clock is not None else SystemStrategyClock(),
    )


def build_strategy_router(*, store: StrategyStoreModule) -> APIRouter:
    """
    Build fully wired Strategy Record router.

    Args:
        store: Shared Strategy Record store dependencies.
    Returns:
        APIRouter: Router exposing `/strategies` endpoints.
    Assumptions:
        None.
    Raises:
        ValueError: If store dependency is missing.
    Side Effects:
        None.
    """
    if store is None:  # type: ignore[truthy-bool]
        raise ValueError("build_strategy_router requires store")

    return build_strategies_router(
        list_use_case=ListUserStrategiesUseCase(repository=store.repository),
        get_use_case=GetStrategyUseCase(repository=store.repository),
        update_use_case=UpdateStrategyUseCase(repository=store.repository, clock=store.clock),
        delete_use_case=DeleteStrategyUseCase(repository=store.repository),
    )
