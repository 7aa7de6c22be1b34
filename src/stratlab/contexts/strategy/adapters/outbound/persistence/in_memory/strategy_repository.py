from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable
from uuid import uuid4

from stratlab.contexts.strategy.application.ports.repositories import (
    StrategyListOrder,
    StrategyRepository,
)
from stratlab.contexts.strategy.domain.entities import (
    StrategyDraft,
    StrategyRecord,
    StrategyRecordStatus,
)
from stratlab.contexts.strategy.domain.errors import StrategyStorageError
from stratlab.shared_kernel.primitives import UserId


class InMemoryStrategyRepository(StrategyRepository):
    """
    InMemoryStrategyRepository — deterministic in-memory StrategyRepository adapter.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/application/ports/repositories/strategy_repository.py
      - apps/api/wiring/modules/strategy.py
      - tests/unit/contexts/strategy/adapters
    """

    def __init__(self, *, id_factory: Callable[[], str] | None = None) -> None:
        """
        Initialize empty in-memory storage for strategy records.

        Args:
            id_factory: Optional zero-arg callable producing new record identifiers.
        Returns:
            None.
        Assumptions:
            Adapter lifetime is process-local and non-persistent.
        Raises:
            None.
        Side Effects:
            Creates mutable in-memory dictionary state.
        """
        self._id_factory = id_factory if id_factory is not None else _new_strategy_id
        self._records_by_id: dict[str, StrategyRecord] = {}
        self._lock = threading.Lock()

    def create(self, *, draft: StrategyDraft, created_at: datetime) -> StrategyRecord:
        """
        Persist new draft record with freshly generated identifier.

        Args:
            draft: Editable strategy fields.
            created_at: Creation UTC timestamp.
        Returns:
            StrategyRecord: Persisted record.
        Assumptions:
            Generated identifiers are unique per adapter instance.
        Raises:
            StrategyStorageError: If generated identifier collides with existing record.
        Side Effects:
            Writes record snapshot to in-memory dictionary.
        """
        with self._lock:
            strategy_id = str(self._id_factory())
            if strategy_id in self._records_by_id:
                raise StrategyStorageError("InMemoryStrategyRepository duplicate strategy_id")
            record = StrategyRecord.from_draft(
                strategy_id=strategy_id,
                draft=draft,
                created_at=created_at,
            )
            self._records_by_id[record.strategy_id] = record
            return record

    def find_by_id(self, *, strategy_id: str) -> StrategyRecord | None:
        """Load record snapshot by identifier."""
        with self._lock:
            return self._records_by_id.get(strategy_id)

    def save(self, *, record: StrategyRecord) -> StrategyRecord:
        """
        Replace stored record snapshot.

        Args:
            record: Updated record snapshot.
        Returns:
            StrategyRecord: Persisted snapshot.
        Assumptions:
            `created_at` is owned by the store and preserved from the stored snapshot.
        Raises:
            StrategyStorageError: If record does not exist.
        Side Effects:
            Overwrites record snapshot in in-memory dictionary.
        """
        with self._lock:
            stored = self._records_by_id.get(record.strategy_id)
            if stored is None:
                raise StrategyStorageError(
                    f"InMemoryStrategyRepository missing strategy_id={record.strategy_id}"
                )
            persisted = replace(record, created_at=stored.created_at)
            self._records_by_id[persisted.strategy_id] = persisted
            return persisted

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
        List owner records ordered by requested field with `strategy_id` tie-break.

        Args:
            user_id: Owner identifier.
            status: Optional status filter.
            order_by: Sort field.
            descending: Sort direction.
            limit: Optional maximum number of records.
        Returns:
            tuple[StrategyRecord, ...]: Ordered record snapshots.
        Assumptions:
            Tie-break by `strategy_id` always ascends regardless of direction.
        Raises:
            None.
        Side Effects:
            None.
        """
        with self._lock:
            filtered = [
                record
                for record in self._records_by_id.values()
                if record.user_id == user_id and (status is None or record.status == status)
            ]

        ordered = sorted(filtered, key=lambda item: item.strategy_id)
        ordered.sort(key=lambda item: getattr(item, order_by), reverse=descending)
        if limit is not None:
            ordered = ordered[:limit]
        return tuple(ordered)

    def delete(self, *, strategy_id: str) -> bool:
        """Remove record by identifier and report whether it existed."""
        with self._lock:
            return self._records_by_id.pop(strategy_id, None) is not None


def _new_strategy_id() -> str:
    return uuid4().hex
