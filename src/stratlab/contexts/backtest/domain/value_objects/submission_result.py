from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

SubmissionFailureKind = Literal[
    "transport",
    "timeout",
    "engine_rejected",
    "protocol",
    "artifact_write",
    "unexpected",
]

_FAILURE_KINDS: frozenset[str] = frozenset(
    {"transport", "timeout", "engine_rejected", "protocol", "artifact_write", "unexpected"}
)


@dataclass(frozen=True, slots=True)
class SubmissionFailure:
    """
    SubmissionFailure — classified terminal failure of one submission attempt.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
    """

    kind: SubmissionFailureKind
    reason: str

    def __post_init__(self) -> None:
        if self.kind not in _FAILURE_KINDS:
            raise ValueError(f"SubmissionFailure.kind is not supported: {self.kind!r}")
        normalized_reason = self.reason.strip()
        if not normalized_reason:
            raise ValueError("SubmissionFailure.reason must be non-empty")
        object.__setattr__(self, "reason", normalized_reason)


@dataclass(frozen=True, slots=True)
class JobSubmissionResult:
    """
    JobSubmissionResult — single terminal outcome of one submission attempt.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py

    Invariants:
    - `accepted` is true exactly when `failure` is `None`.
    - `artifact_path` is set only for accepted attempts that persisted the source.
    """

    strategy_id: str
    accepted: bool
    engine_status: str | None = None
    artifact_path: Path | None = None
    failure: SubmissionFailure | None = None

    def __post_init__(self) -> None:
        if self.accepted and self.failure is not None:
            raise ValueError("JobSubmissionResult accepted attempt must not carry failure")
        if not self.accepted and self.failure is None:
            raise ValueError("JobSubmissionResult rejected attempt requires failure")
        if not self.accepted and self.artifact_path is not None:
            raise ValueError("JobSubmissionResult rejected attempt must not carry artifact_path")

    @classmethod
    def done(
        cls,
        *,
        strategy_id: str,
        engine_status: str | None,
        artifact_path: Path | None,
    ) -> JobSubmissionResult:
        return cls(
            strategy_id=strategy_id,
            accepted=True,
            engine_status=engine_status,
            artifact_path=artifact_path,
        )

    @classmethod
    def failed(
        cls,
        *,
        strategy_id: str,
        kind: SubmissionFailureKind,
        reason: str,
        engine_status: str | None = None,
    ) -> JobSubmissionResult:
        return cls(
            strategy_id=strategy_id,
            accepted=False,
            engine_status=engine_status,
            failure=SubmissionFailure(kind=kind, reason=reason),
        )

    @property
    def reason(self) -> str | None:
        return self.failure.reason if self.failure is not None else None
