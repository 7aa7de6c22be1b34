from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal

from stratlab.contexts.strategy.domain.errors import (
    StrategyStatusTransitionError,
    StrategyValidationError,
)
from stratlab.shared_kernel.primitives import DateRange, Timeframe, UserId

StrategyRecordStatus = Literal["draft", "running", "completed", "failed"]

_ALLOWED_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "draft": frozenset({"running"}),
    "running": frozenset({"running", "completed", "failed"}),
    "completed": frozenset({"running"}),
    "failed": frozenset({"running"}),
}


@dataclass(frozen=True, slots=True)
class StrategyDraft:
    """
    StrategyDraft — user-editable Strategy Record fields before the store assigns identity.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/application/ports/repositories/strategy_repository.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py
    """

    name: str
    user_id: UserId
    initial_equity: float
    timeframe: Timeframe
    date_range: DateRange

    def __post_init__(self) -> None:
        """
        Validate and normalize editable strategy fields.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Value objects (`UserId`, `Timeframe`, `DateRange`) are already validated.
        Raises:
            StrategyValidationError: If name is blank or initial equity is not positive.
        Side Effects:
            Normalizes `name` and `initial_equity` in place.
        """
        normalized_name, normalized_equity = _validate_editable_fields(
            name=self.name,
            initial_equity=self.initial_equity,
        )
        object.__setattr__(self, "name", normalized_name)
        object.__setattr__(self, "initial_equity", normalized_equity)


@dataclass(frozen=True, slots=True)
class StrategyRecord:
    """
    StrategyRecord — immutable snapshot of one stored strategy and its latest backtest status.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/adapters/outbound/persistence/in_memory/
        strategy_repository.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py
      - apps/api/routes/strategies.py
    """

    strategy_id: str
    name: str
    user_id: UserId
    initial_equity: float
    timeframe: Timeframe
    date_range: DateRange
    status: StrategyRecordStatus
    created_at: datetime
    updated_at: datetime
    run_count: int = 0
    last_run_at: datetime | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """
        Validate record identity, status-specific fields, and UTC timestamp invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `error` is present only for `failed` records.
        Raises:
            StrategyValidationError: If one of record invariants is violated.
        Side Effects:
            Normalizes `strategy_id`, `name`, `initial_equity`, and `error` in place.
        """
        normalized_id = self.strategy_id.strip()
        if not normalized_id:
            raise StrategyValidationError("StrategyRecord.strategy_id must be non-empty")
        normalized_name, normalized_equity = _validate_editable_fields(
            name=self.name,
            initial_equity=self.initial_equity,
        )
        if self.status not in _ALLOWED_STATUS_TRANSITIONS:
            raise StrategyValidationError(
                f"StrategyRecord.status must be one of {sorted(_ALLOWED_STATUS_TRANSITIONS)}, "
                f"got {self.status!r}"
            )
        if isinstance(self.run_count, bool) or self.run_count < 0:
            raise StrategyValidationError("StrategyRecord.run_count must be >= 0")

        normalized_error = self.error.strip() if self.error is not None else None
        if self.status == "failed" and not normalized_error:
            raise StrategyValidationError("StrategyRecord.error is required for failed status")
        if self.status != "failed" and normalized_error:
            raise StrategyValidationError("StrategyRecord.error is allowed only for failed status")

        _ensure_utc_datetime(name="created_at", value=self.created_at)
        _ensure_utc_datetime(name="updated_at", value=self.updated_at)
        if self.last_run_at is not None:
            _ensure_utc_datetime(name="last_run_at", value=self.last_run_at)
        if self.updated_at < self.created_at:
            raise StrategyValidationError("StrategyRecord.updated_at must be >= created_at")

        object.__setattr__(self, "strategy_id", normalized_id)
        object.__setattr__(self, "name", normalized_name)
        object.__setattr__(self, "initial_equity", normalized_equity)
        object.__setattr__(self, "error", normalized_error or None)

    @classmethod
    def from_draft(
        cls,
        *,
        strategy_id: str,
        draft: StrategyDraft,
        created_at: datetime,
    ) -> StrategyRecord:
        """
        Build new `draft` record from editable fields and store-assigned identifier.

        Args:
            strategy_id: Store-assigned opaque identifier.
            draft: Editable strategy fields.
            created_at: Creation UTC timestamp.
        Returns:
            StrategyRecord: New record with `status=draft` and `run_count=0`.
        Assumptions:
            `updated_at` equals `created_at` for freshly created records.
        Raises:
            StrategyValidationError: If built record violates invariants.
        Side Effects:
            None.
        """
        return cls(
            strategy_id=strategy_id,
            name=draft.name,
            user_id=draft.user_id,
            initial_equity=draft.initial_equity,
            timeframe=draft.timeframe,
            date_range=draft.date_range,
            status="draft",
            created_at=created_at,
            updated_at=created_at,
        )

    def is_owned_by(self, *, user_id: UserId) -> bool:
        return self.user_id == user_id

    def with_params(self, *, draft: StrategyDraft, changed_at: datetime) -> StrategyRecord:
        """
        Return copy with editable fields replaced from draft.

        Args:
            draft: New editable field values.
            changed_at: Update UTC timestamp.
        Returns:
            StrategyRecord: Updated immutable snapshot.
        Assumptions:
            Ownership cannot change through params update.
        Raises:
            StrategyValidationError: If draft owner differs from record owner.
        Side Effects:
            None.
        """
        if draft.user_id != self.user_id:
            raise StrategyValidationError("StrategyRecord owner cannot be changed")
        return replace(
            self,
            name=draft.name,
            initial_equity=draft.initial_equity,
            timeframe=draft.timeframe,
            date_range=draft.date_range,
            updated_at=changed_at,
        )

    def mark_running(self, *, run_count: int, changed_at: datetime) -> StrategyRecord:
        """
        Start new submission attempt: clear error, bump run counter, stamp run time.

        Args:
            run_count: New run counter value.
            changed_at: Submission UTC timestamp.
        Returns:
            StrategyRecord: Snapshot with `status=running`.
        Assumptions:
            Run counter increments strictly on every submission attempt.
        Raises:
            StrategyStatusTransitionError: If counter does not increase.
        Side Effects:
            None.
        """
        self._ensure_transition(next_status="running")
        if run_count <= self.run_count:
            raise StrategyStatusTransitionError(
                f"StrategyRecord.run_count must increase, got {run_count} after {self.run_count}"
            )
        return replace(
            self,
            status="running",
            error=None,
            run_count=run_count,
            last_run_at=changed_at,
            updated_at=changed_at,
        )

    def mark_failed(self, *, error: str, changed_at: datetime) -> StrategyRecord:
        """
        Record failed submission attempt with human-readable reason.

        Args:
            error: Failure reason.
            changed_at: Failure UTC timestamp.
        Returns:
            StrategyRecord: Snapshot with `status=failed`.
        Assumptions:
            Only running records can fail.
        Raises:
            StrategyStatusTransitionError: If current status cannot transition to failed.
            StrategyValidationError: If error is blank.
        Side Effects:
            None.
        """
        self._ensure_transition(next_status="failed")
        return replace(self, status="failed", error=error, updated_at=changed_at)

    def mark_completed(self, *, changed_at: datetime) -> StrategyRecord:
        """Mark running record as completed once its trade ledger was received."""
        self._ensure_transition(next_status="completed")
        return replace(self, status="completed", error=None, updated_at=changed_at)

    def _ensure_transition(self, *, next_status: str) -> None:
        allowed = _ALLOWED_STATUS_TRANSITIONS[self.status]
        if next_status not in allowed:
            raise StrategyStatusTransitionError(
                f"StrategyRecord status transition {self.status} -> {next_status} is not allowed"
            )


def is_strategy_record_status(*, value: str) -> bool:
    """Return whether literal is one of supported record statuses."""
    return value in _ALLOWED_STATUS_TRANSITIONS


def _validate_editable_fields(*, name: str, initial_equity: float) -> tuple[str, float]:
    """
    Validate strategy name and initial equity shared by draft and record.

    Args:
        name: Strategy display name.
        initial_equity: Starting equity for backtest.
    Returns:
        tuple[str, float]: Normalized `(name, initial_equity)`.
    Assumptions:
        Equity is expressed in quote currency units.
    Raises:
        StrategyValidationError: If name is blank or equity is not a finite positive number.
    Side Effects:
        None.
    """
    normalized_name = name.strip() if isinstance(name, str) else ""
    if not normalized_name:
        raise StrategyValidationError("Strategy name must be non-empty")
    if isinstance(initial_equity, bool) or not isinstance(initial_equity, (int, float)):
        raise StrategyValidationError("Strategy initial_equity must be a number")
    normalized_equity = float(initial_equity)
    if not math.isfinite(normalized_equity) or not normalized_equity > 0.0:
        raise StrategyValidationError("Strategy initial_equity must be a finite number > 0")
    return normalized_name, normalized_equity


def _ensure_utc_datetime(*, name: str, value: datetime) -> None:
    """
    Validate timezone-aware UTC datetime field.

    Args:
        name: Field name for diagnostics.
        value: Datetime value.
    Returns:
        None.
    Assumptions:
        Record timestamps are stored in UTC only.
    Raises:
        StrategyValidationError: If datetime is naive or has non-zero offset.
    Side Effects:
        None.
    """
    offset = value.utcoffset() if isinstance(value, datetime) else None
    if offset is None:
        raise StrategyValidationError(f"StrategyRecord.{name} must be timezone-aware UTC datetime")
    if offset.total_seconds() != 0:
        raise StrategyValidationError(f"StrategyRecord.{name} must be UTC datetime")
