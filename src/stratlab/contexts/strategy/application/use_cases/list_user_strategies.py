from __future__ import annotations

from stratlab.contexts.strategy.application.ports.repositories import (
    StrategyListOrder,
    StrategyRepository,
)
from stratlab.contexts.strategy.application.use_cases._shared import parse_user_id
from stratlab.contexts.strategy.application.use_cases.errors import (
    map_strategy_exception,
    validation_error,
)
from stratlab.contexts.strategy.domain.entities import StrategyRecord, is_strategy_record_status
from stratlab.platform.errors import StratlabError

_ALLOWED_ORDER_FIELDS = ("created_at", "updated_at", "name")
_ALLOWED_DIRECTIONS = ("asc", "desc")


class ListUserStrategiesUseCase:
    """
    ListUserStrategiesUseCase — list owner records with status filter, ordering, and limit.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/application/ports/repositories/strategy_repository.py
      - apps/api/routes/strategies.py
    """

    def __init__(self, *, repository: StrategyRepository) -> None:
        """
        Initialize use-case with strategy repository dependency.

        Args:
            repository: Strategy repository port.
        Returns:
            None.
        Assumptions:
            None.
        Raises:
            ValueError: If repository dependency is missing.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("ListUserStrategiesUseCase requires repository")
        self._repository = repository

    def execute(
        self,
        *,
        user_id: str,
        status: str | None = None,
        order_by: str = "created_at",
        direction: str = "desc",
        limit: int | None = None,
    ) -> tuple[StrategyRecord, ...]:
        """
        Validate list query and load owner records.

        Args:
            user_id: Owner identifier.
            status: Optional status filter literal.
            order_by: One of `created_at`, `updated_at`, `name`.
            direction: `asc` or `desc`.
            limit: Optional positive maximum number of records.
        Returns:
            tuple[StrategyRecord, ...]: Ordered record snapshots.
        Assumptions:
            Newest records come first by default.
        Raises:
            StratlabError: If query parameters are invalid or storage fails.
        Side Effects:
            Reads records from storage.
        """
        owner = parse_user_id(raw_user_id=user_id)
        errors: list[dict[str, str]] = []
        if status is not None and not is_strategy_record_status(value=status):
            errors.append(
                {
                    "path": "query.status",
                    "code": "invalid_choice",
                    "message": "status must be one of draft, running, completed, failed",
                }
            )
        if order_by not in _ALLOWED_ORDER_FIELDS:
            errors.append(
                {
                    "path": "query.order_by",
                    "code": "invalid_choice",
                    "message": f"order_by must be one of {', '.join(_ALLOWED_ORDER_FIELDS)}",
                }
            )
        if direction not in _ALLOWED_DIRECTIONS:
            errors.append(
                {
                    "path": "query.direction",
                    "code": "invalid_choice",
                    "message": "direction must be one of asc, desc",
                }
            )
        if limit is not None and limit <= 0:
            errors.append(
                {
                    "path": "query.limit",
                    "code": "greater_than",
                    "message": "limit must be > 0",
                }
            )
        if errors:
            raise validation_error(message="Invalid strategy list query", errors=errors)

        order_field: StrategyListOrder = order_by  # type: ignore[assignment]
        try:
            return self._repository.list_for_user(
                user_id=owner,
                status=status,  # type: ignore[arg-type]
                order_by=order_field,
                descending=direction == "desc",
                limit=limit,
            )
        except StratlabError:
            raise
        except Exception as error:  # noqa: BLE001
            raise map_strategy_exception(error=error) from error
