from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from stratlab.contexts.backtest.domain.value_objects import SubmissionFailureKind
from stratlab.contexts.strategy.domain.entities import StrategyRecord

DEFAULT_SOURCE_LANGUAGE = "cpp"


@dataclass(frozen=True, slots=True)
class StrategyParams:
    """
    StrategyParams — raw backtest parameters as received from the HTTP layer.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py
      - apps/api/dto/backtests.py

    Validation happens in the use-case so every missing field is reported at once.
    """

    name: str
    user_id: str
    initial_equity: float | None
    timeframe: str
    date_from: date | None
    date_to: date | None
    source_code: str
    language: str = DEFAULT_SOURCE_LANGUAGE


@dataclass(frozen=True, slots=True)
class CreateStrategySubmission:
    """Submit a brand-new strategy; the store assigns its identifier."""

    params: StrategyParams


@dataclass(frozen=True, slots=True)
class ResubmitStrategySubmission:
    """
    Resubmit an existing strategy with (possibly edited) parameters.

    `run_count` is the caller's view of the counter; the stored counter wins when larger.
    """

    strategy_id: str
    params: StrategyParams
    run_count: int | None = None


BacktestSubmission = CreateStrategySubmission | ResubmitStrategySubmission


@dataclass(frozen=True, slots=True)
class SubmitBacktestResult:
    """
    SubmitBacktestResult — HTTP Job Handler outcome for one submission.

    Docs:
      - docs/architecture/backtest/backtest-http-job-handler-v1.md
    Related:
      - apps/api/routes/backtests.py
    """

    strategy_id: str
    accepted: bool
    detail: str
    artifact_path: Path | None = None
    failure_kind: SubmissionFailureKind | None = None


@dataclass(frozen=True, slots=True)
class StrategyCodeResult:
    """Strategy record with its persisted source code (empty when no artifact exists)."""

    strategy: StrategyRecord
    code: str
    message: str | None = None
