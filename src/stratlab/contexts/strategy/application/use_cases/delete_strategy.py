from __future__ import annotations

from stratlab.contexts.strategy.application.ports.repositories import StrategyRepository
from stratlab.contexts.strategy.application.use_cases._shared import (
    parse_user_id,
    require_owned_strategy,
)
from stratlab.contexts.strategy.application.use_cases.errors import (
    map_strategy_exception,
    strategy_not_found,
)
from stratlab.platform.errors import StratlabError


class DeleteStrategyUseCase:
    """
    DeleteStrategyUseCase — remove one owned Strategy Record from the store.

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
            raise ValueError("DeleteStrategyUseCase requires repository")
        self._repository = repository

    def execute(self, *, strategy_id: str, user_id: str) -> None:
        """
        Delete owned record.

        Args:
            strategy_id: Target strategy identifier.
            user_id: Requesting owner identifier.
        Returns:
            None.
        Assumptions:
            Persisted source artifact stays on disk.
        Raises:
            StratlabError: If record is missing/forbidden or storage fails.
        Side Effects:
            Removes one record from storage.
        """
        record = require_owned_strategy(
            repository=self._repository,
            strategy_id=strategy_id,
            user_id=parse_user_id(raw_user_id=user_id),
        )
        try:
            deleted = self._repository.delete(strategy_id=record.strategy_id)
        except StratlabError:
            raise
        except Exception as error:  # noqa: BLE001
            raise map_strategy_exception(error=error) from error
        if not deleted:
            raise strategy_not_found(strategy_id=record.strategy_id)
