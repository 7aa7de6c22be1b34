from __future__ import annotations

from datetime import datetime
from typing import Literal, Protocol

from stratlab.contexts.strategy.domain.entities import (
    StrategyDraft,
    StrategyRecord,
    StrategyRecordStatus,
)
from stratlab.shared_kernel.primitives import UserId

StrategyListOrder = Literal["created_at", "updated_at", "name"]


class StrategyRepository(Protocol):
    """
    StrategyRepository — key-value document store port for Strategy Records.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/adapters/outbound/persistence/in_memory/
        strategy_repository.py
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
    """

    def create(self, *, draft: StrategyDraft, created_at: datetime) -> StrategyRecord:
        """
        Persist new record built from draft and assign opaque unique identifier.

        Args:
            draft: Editable strategy fields.
            created_at: Creation UTC timestamp.
        Returns:
            StrategyRecord: Persisted record with `status=draft`.
        Assumptions:
            Identifier generation is owned by the store.
        Raises:
            StrategyStorageError: If store cannot persist record.
        Side Effects:
            Writes one record into storage.
        """
        ...

    def find_by_id(self, *, strategy_id: str) -> StrategyRecord | None:
        """
        Load record by identifier without owner filtering.

        Args:
            strategy_id: Record identifier.
        Returns:
            StrategyRecord | None: Stored record or `None`.
        Assumptions:
            Use-case layer performs explicit ownership checks.
        Raises:
            StrategyStorageError: If store lookup fails.
        Side Effects:
            None.
        """
        ...

    def save(self, *, record: StrategyRecord) -> StrategyRecord:
        """
        Replace stored record snapshot by identifier.

        Args:
            record: Updated record snapshot.
        Returns:
            StrategyRecord: Persisted snapshot.
        Assumptions:
            Record already exists in storage.
        Raises:
            StrategyStorageError: If record is missing or write fails.
        Side Effects:
            Overwrites one record in storage.
        """
        ...

    def list_for_user(
        self,
        *,
        user_id: UserId,
        status: StrategyRecordStatus | None = None,
        order_by: StrategyListOrder = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> tuple[StrategyRecord, ...]:
        """
        List owner records with optional status filter and deterministic ordering.

        Args:
            user_id: Owner identifier.
            status: Optional status filter.
            order_by: Sort field.
            descending: Sort direction.
            limit: Optional maximum number of records.
        Returns:
            tuple[StrategyRecord, ...]: Ordered record snapshots.
        Assumptions:
            Ties are broken by `strategy_id` ascending.
        Raises:
            StrategyStorageError: If store query fails.
        Side Effects:
            None.
        """
        ...

    def delete(self, *, strategy_id: str) -> bool:
        """
        Remove record by identifier.

        Args:
            strategy_id: Record identifier.
        Returns:
            bool: `True` when record existed and was removed.
        Assumptions:
            Source artifacts on disk are not removed by the record store.
        Raises:
            StrategyStorageError: If store delete fails.
        Side Effects:
            Removes one record from storage.
        """
        ...
