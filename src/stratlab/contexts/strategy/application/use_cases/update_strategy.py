from __future__ import annotations

from datetime import date

from stratlab.contexts.strategy.application.ports.clock import StrategyClock
from stratlab.contexts.strategy.application.ports.repositories import StrategyRepository
from stratlab.contexts.strategy.application.use_cases._shared import (
    ensure_utc_datetime,
    parse_user_id,
    require_owned_strategy,
)
from stratlab.contexts.strategy.application.use_cases.errors import (
    map_strategy_exception,
    validation_error,
)
from stratlab.contexts.strategy.domain.entities import StrategyDraft, StrategyRecord
from stratlab.platform.errors import StratlabError
from stratlab.shared_kernel.primitives import DateRange, Timeframe


class UpdateStrategyUseCase:
    """
    UpdateStrategyUseCase — partial update of whitelisted editable Strategy Record fields.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - apps/api/routes/strategies.py
    """

    def __init__(self, *, repository: StrategyRepository, clock: StrategyClock) -> None:
        """
        Initialize use-case dependencies.

        Args:
            repository: Strategy repository port.
            clock: Clock port for deterministic UTC timestamps.
        Returns:
            None.
        Assumptions:
            None.
        Raises:
            ValueError: If required dependencies are missing.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("UpdateStrategyUseCase requires repository")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("UpdateStrategyUseCase requires clock")
        self._repository = repository
        self._clock = clock

    def execute(
        self,
        *,
        strategy_id: str,
        user_id: str,
        name: str | None = None,
        initial_equity: float | None = None,
        timeframe: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> StrategyRecord:
        """
        Apply provided whitelisted fields to an owned record and persist it.

        Args:
            strategy_id: Target strategy identifier.
            user_id: Requesting owner identifier.
            name: Optional new display name.
            initial_equity: Optional new starting equity.
            timeframe: Optional new resolution tag.
            date_from: Optional new range start.
            date_to: Optional new range end.
        Returns:
            StrategyRecord: Persisted updated snapshot.
        Assumptions:
            Status, run counter, and owner are not editable through this use-case.
        Raises:
            StratlabError: If record is missing/forbidden, values are invalid, or storage fails.
        Side Effects:
            Overwrites one record in storage.
        """
        owner = parse_user_id(raw_user_id=user_id)
        record = require_owned_strategy(
            repository=self._repository,
            strategy_id=strategy_id,
            user_id=owner,
        )
        try:
            draft = StrategyDraft(
                name=record.name if name is None else name,
                user_id=owner,
                initial_equity=record.initial_equity if initial_equity is None else initial_equity,
                timeframe=record.timeframe if timeframe is None else Timeframe(timeframe),
                date_range=DateRange(
                    start=record.date_range.start if date_from is None else date_from,
                    end=record.date_range.end if date_to is None else date_to,
                ),
            )
        except ValueError as error:
            raise validation_error(message=str(error)) from error

        try:
            changed_at = ensure_utc_datetime(value=self._clock.now(), field_name="clock.now")
            updated = record.with_params(draft=draft, changed_at=changed_at)
            return self._repository.save(record=updated)
        except StratlabError:
            raise
        except Exception as error:  # noqa: BLE001
            raise map_strategy_exception(error=error) from error
