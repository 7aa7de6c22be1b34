from __future__ import annotations

from stratlab.contexts.strategy.application.ports.repositories import StrategyRepository
from stratlab.contexts.strategy.application.use_cases._shared import (
    parse_user_id,
    require_owned_strategy,
)
from stratlab.contexts.strategy.domain.entities import StrategyRecord


class GetStrategyUseCase:
    """
    GetStrategyUseCase — load one strategy record with explicit owner-only visibility checks.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/application/use_cases/_shared.py
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
            Repository can load record by id without owner filter for explicit checks.
        Raises:
            ValueError: If repository dependency is missing.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("GetStrategyUseCase requires repository")
        self._repository = repository

    def execute(self, *, strategy_id: str, user_id: str) -> StrategyRecord:
        """
        Load one record and enforce owner-only visibility in use-case layer.

        Args:
            strategy_id: Target strategy identifier.
            user_id: Requesting owner identifier.
        Returns:
            StrategyRecord: Owned record snapshot.
        Assumptions:
            None.
        Raises:
            StratlabError: If record is missing, forbidden, or storage fails.
        Side Effects:
            Reads one record from storage.
        """
        return require_owned_strategy(
            repository=self._repository,
            strategy_id=strategy_id,
            user_id=parse_user_id(raw_user_id=user_id),
        )
