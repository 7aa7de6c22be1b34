"""
Strategy Record API routes for owner-scoped list, get, update, and delete.

Docs:
  - docs/architecture/strategy/strategy-record-store-v1.md
  - docs/architecture/api/api-errors-v1.md
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from apps.api.dto import StrategyResponse, UpdateStrategyRequest, build_strategy_response
from stratlab.contexts.strategy.application.use_cases import (
    DeleteStrategyUseCase,
    GetStrategyUseCase,
    ListUserStrategiesUseCase,
    UpdateStrategyUseCase,
)


def build_strategies_router(
    *,
    list_use_case: ListUserStrategiesUseCase,
    get_use_case: GetStrategyUseCase,
    update_use_case: UpdateStrategyUseCase,
    delete_use_case: DeleteStrategyUseCase,
) -> APIRouter:
    """
    Build Strategy Record router.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - apps/api/dto/strategies.py
      - apps/api/wiring/modules/strategy.py
      - src/stratlab/contexts/strategy/application/use_cases/

    Args:
        list_use_case: Owner-scoped list use-case.
        get_use_case: Owner-scoped get use-case.
        update_use_case: Whitelisted fields update use-case.
        delete_use_case: Owner-scoped delete use-case.
    Returns:
        APIRouter: Configured router.
    Assumptions:
        Owner is passed explicitly as `user_id` query parameter; checks live in use-cases.
    Raises:
        ValueError: If any required dependency is missing.
    Side Effects:
        None.
    """
    if list_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_strategies_router requires list_use_case")
    if get_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_strategies_router requires get_use_case")
    if update_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_strategies_router requires update_use_case")
    if delete_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_strategies_router requires delete_use_case")

    router = APIRouter(tags=["strategy"])

    @router.get("/strategies", response_model=list[StrategyResponse])
    def get_strategies(
        user_id: str = "",
        status: str | None = None,
        order_by: str = "created_at",
        direction: str = "desc",
        limit: int | None = None,
    ) -> list[StrategyResponse]:
        """
        List owner records with optional status filter and deterministic ordering.

        Args:
            user_id: Owner identifier.
            status: Optional status filter.
            order_by: `created_at`, `updated_at`, or `name`.
            direction: `asc` or `desc`.
            limit: Optional positive page size.
        Returns:
            list[StrategyResponse]: Ordered owner records.
        Assumptions:
            Ties are broken by `strategy_id`.
        Raises:
            StratlabError: Validation errors mapped by global handlers.
        Side Effects:
            Reads records from storage.
        """
        records = list_use_case.execute(
            user_id=user_id,
            status=status,
            order_by=order_by,
            direction=direction,
            limit=limit,
        )
        return [build_strategy_response(record=record) for record in records]

    @router.get("/strategies/{strategy_id}", response_model=StrategyResponse)
    def get_strategy(strategy_id: str, user_id: str = "") -> StrategyResponse:
        record = get_use_case.execute(strategy_id=strategy_id, user_id=user_id)
        return build_strategy_response(record=record)

    @router.put("/strategies/{strategy_id}", response_model=StrategyResponse)
    def put_strategy(
        strategy_id: str,
        request: UpdateStrategyRequest,
        user_id: str = "",
    ) -> StrategyResponse:
        """
        Apply whitelisted field edits to owned record.

        Args:
            strategy_id: Target strategy identifier.
            request: Edited fields; omitted fields keep stored values.
            user_id: Owner identifier.
        Returns:
            StrategyResponse: Updated record.
        Assumptions:
            Status, run counter, and error are not editable through this endpoint.
        Raises:
            StratlabError: Validation/not_found/forbidden errors.
        Side Effects:
            Persists updated record.
        """
        date_range = request.date_range
        record = update_use_case.execute(
            strategy_id=strategy_id,
            user_id=user_id,
            name=request.name,
            initial_equity=request.initial_equity,
            timeframe=request.timeframe,
            date_from=date_range.from_ if date_range is not None else None,
            date_to=date_range.to if date_range is not None else None,
        )
        return build_strategy_response(record=record)

    @router.delete("/strategies/{strategy_id}", status_code=204, response_model=None)
    def delete_strategy(strategy_id: str, user_id: str = "") -> Response:
        delete_use_case.execute(strategy_id=strategy_id, user_id=user_id)
        return Response(status_code=204)

    return router
