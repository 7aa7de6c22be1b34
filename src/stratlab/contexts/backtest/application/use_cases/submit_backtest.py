from __future__ import annotations

import logging
import math
from datetime import datetime

from stratlab.contexts.backtest.application.dto import (
    BacktestSubmission,
    CreateStrategySubmission,
    ResubmitStrategySubmission,
    StrategyParams,
    SubmitBacktestResult,
)
from stratlab.contexts.backtest.application.services import JobSubmissionClient, SubmissionGuard
from stratlab.contexts.backtest.application.use_cases.errors import map_backtest_exception
from stratlab.contexts.backtest.domain.errors import BacktestValidationError
from stratlab.contexts.backtest.domain.value_objects import JobSubmissionRequest
from stratlab.contexts.strategy.application.ports import StrategyClock, StrategyRepository
from stratlab.contexts.strategy.application.use_cases._shared import (
    ensure_utc_datetime,
    require_owned_strategy,
)
from stratlab.contexts.strategy.domain.entities import StrategyDraft, StrategyRecord
from stratlab.platform.errors import StratlabError
from stratlab.shared_kernel.primitives import DateRange, Timeframe, UserId

log = logging.getLogger(__name__)


class SubmitBacktestUseCase:
    """
    SubmitBacktestUseCase — HTTP Job Handler: create-or-resubmit record and submit engine job.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
      - src/stratlab/contexts/strategy/domain/entities/strategy_record.py
      - apps/api/routes/backtests.py
    """

    def __init__(
        self,
        *,
        repository: StrategyRepository,
        clock: StrategyClock,
        client: JobSubmissionClient,
        guard: SubmissionGuard,
        credential: str,
    ) -> None:
        """
        Initialize submission use-case dependencies.

        Args:
            repository: Strategy Record store port.
            clock: Clock port for deterministic UTC timestamps.
            client: Engine job submission client.
            guard: Per-strategy in-flight submission guard.
            credential: Engine credential attached to submit and probe frames.
        Returns:
            None.
        Assumptions:
            Credential is resolved from environment by wiring layer; empty is allowed in dev.
        Raises:
            ValueError: If required dependencies are missing.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("SubmitBacktestUseCase requires repository")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("SubmitBacktestUseCase requires clock")
        if client is None:  # type: ignore[truthy-bool]
            raise ValueError("SubmitBacktestUseCase requires client")
        if guard is None:  # type: ignore[truthy-bool]
            raise ValueError("SubmitBacktestUseCase requires guard")
        if credential is None:  # type: ignore[truthy-bool]
            raise ValueError("SubmitBacktestUseCase requires credential")
        self._repository = repository
        self._clock = clock
        self._client = client
        self._guard = guard
        self._credential = credential

    async def execute(self, *, submission: BacktestSubmission) -> SubmitBacktestResult:
        """
        Validate params, persist running record, submit engine job, and record failures.

        Args:
            submission: Create or resubmit variant with raw params.
        Returns:
            SubmitBacktestResult: Accepted or rejected submission outcome.
        Assumptions:
            Record is `running` with incremented `run_count` before engine is contacted.
            Rejected submissions leave record `failed` with engine/transport reason.
        Raises:
            StratlabError: If params are invalid, record is missing/forbidden,
                strategy is busy, or storage fails.
        Side Effects:
            Writes Strategy Record, talks to engine, may write source artifact.
        """
        try:
            draft, source_code, language = _validate_params(
                params=submission.params,
                strategy_id=(
                    submission.strategy_id
                    if isinstance(submission, ResubmitStrategySubmission)
                    else None
                ),
            )
            if isinstance(submission, CreateStrategySubmission):
                record = self._repository.create(draft=draft, created_at=self._now())
                async with self._guard.hold(strategy_id=record.strategy_id):
                    running = self._repository.save(
                        record=record.mark_running(run_count=1, changed_at=self._now())
                    )
                    return await self._submit(
                        record=running,
                        source_code=source_code,
                        language=language,
                        detail="Strategy created and backtest started successfully",
                    )

            strategy_id = submission.strategy_id.strip()
            require_owned_strategy(
                repository=self._repository,
                strategy_id=strategy_id,
                user_id=draft.user_id,
            )
            async with self._guard.hold(strategy_id=strategy_id):
                existing = require_owned_strategy(
                    repository=self._repository,
                    strategy_id=submission.strategy_id,
                    user_id=draft.user_id,
                )
                changed_at = self._now()
                run_count = max(submission.run_count or 0, existing.run_count + 1)
                running = self._repository.save(
                    record=existing.with_params(draft=draft, changed_at=changed_at).mark_running(
                        run_count=run_count,
                        changed_at=changed_at,
                    )
                )
                return await self._submit(
                    record=running,
                    source_code=source_code,
                    language=language,
                    detail="Strategy updated and backtest restarted successfully",
                )
        except StratlabError:
            raise
        except Exception as error:  # noqa: BLE001
            raise map_backtest_exception(error=error) from error

    async def _submit(
        self,
        *,
        record: StrategyRecord,
        source_code: str,
        language: str,
        detail: str,
    ) -> SubmitBacktestResult:
        log.info(
            "component=submit_backtest status=submitting strategy_id=%s user_id=%s run_count=%s",
            record.strategy_id,
            record.user_id,
            record.run_count,
        )
        result = await self._client.submit(
            request=JobSubmissionRequest(
                strategy_id=record.strategy_id,
                user_id=record.user_id,
                date_range=record.date_range,
                language=language,
                source_code=source_code,
                timeframe=record.timeframe,
                credential=self._credential,
            )
        )
        if result.accepted:
            return SubmitBacktestResult(
                strategy_id=record.strategy_id,
                accepted=True,
                detail=detail,
                artifact_path=result.artifact_path,
            )

        reason = result.reason or "unknown error"
        self._record_failure(strategy_id=record.strategy_id, reason=reason)
        return SubmitBacktestResult(
            strategy_id=record.strategy_id,
            accepted=False,
            detail=reason,
            failure_kind=result.failure.kind if result.failure is not None else None,
        )

    def _record_failure(self, *, strategy_id: str, reason: str) -> None:
        """
        Mark the stored record failed, starting from its state after the engine exchange.

        Args:
            strategy_id: Submitted strategy identifier.
            reason: Human-readable failure reason.
        Returns:
            None.
        Assumptions:
            Record may be edited, completed, or deleted while the attempt awaits the engine.
        Raises:
            None.
        Side Effects:
            Writes Strategy Record when it still exists and is `running`.
        """
        current = self._repository.find_by_id(strategy_id=strategy_id)
        if current is None:
            log.warning(
                "component=submit_backtest status=failure_not_recorded strategy_id=%s "
                "cause=record_deleted reason=%s",
                strategy_id,
                reason,
            )
            return
        if current.status != "running":
            log.warning(
                "component=submit_backtest status=failure_not_recorded strategy_id=%s "
                "cause=status_%s reason=%s",
                strategy_id,
                current.status,
                reason,
            )
            return
        self._repository.save(record=current.mark_failed(error=reason, changed_at=self._now()))

    def _now(self) -> datetime:
        return ensure_utc_datetime(value=self._clock.now(), field_name="clock.now")


def _validate_params(
    *,
    params: StrategyParams,
    strategy_id: str | None,
) -> tuple[StrategyDraft, str, str]:
    """
    Validate raw submission params and build editable record fields.

    Args:
        params: Raw params from HTTP layer.
        strategy_id: Resubmitted strategy identifier or `None` for create.
    Returns:
        tuple[StrategyDraft, str, str]: Draft, source code, and source language.
    Assumptions:
        All invalid fields are collected before raising.
    Raises:
        BacktestValidationError: If one or more fields are missing or invalid.
    Side Effects:
        None.
    """
    errors: list[dict[str, str]] = []

    def _fail(path: str, code: str, message: str) -> None:
        errors.append({"path": path, "code": code, "message": message})

    if strategy_id is not None and not strategy_id.strip():
        _fail("body.strategy_id", "required", "strategy_id is required for resubmission")
    if not params.name or not params.name.strip():
        _fail("body.name", "required", "name is required")
    if not params.user_id or not params.user_id.strip():
        _fail("body.user_id", "required", "user_id is required")
    if (
        isinstance(params.initial_equity, bool)
        or not isinstance(params.initial_equity, (int, float))
        or not math.isfinite(params.initial_equity)
        or not params.initial_equity > 0
    ):
        _fail("body.initial_equity", "greater_than", "initial_equity must be a finite number > 0")
    if not params.source_code or not params.source_code.strip():
        _fail("body.code", "required", "code is required")
    if not params.language or not params.language.strip():
        _fail("body.language", "required", "language must be non-empty")

    timeframe: Timeframe | None = None
    try:
        timeframe = Timeframe(params.timeframe)
    except ValueError as error:
        _fail("body.timeframe", "invalid_choice", str(error))

    date_range: DateRange | None = None
    if params.date_from is None or params.date_to is None:
        _fail("body.date_range", "required", "Date range (from and to) is required")
    else:
        try:
            date_range = DateRange(start=params.date_from, end=params.date_to)
        except ValueError as error:
            _fail("body.date_range", "invalid_range", str(error))

    if errors or timeframe is None or date_range is None:
        raise BacktestValidationError("Invalid backtest submission", errors=errors)

    draft = StrategyDraft(
        name=params.name,
        user_id=UserId(params.user_id),
        initial_equity=params.initial_equity,
        timeframe=timeframe,
        date_range=date_range,
    )
    return draft, params.source_code, params.language.strip()
