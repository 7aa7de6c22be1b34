from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stratlab.shared_kernel.primitives import DateRange, Timeframe, UserId

ENGINE_SUBMIT_ACTION = "test"
ENGINE_RESULT_ACTION = "result"


@dataclass(frozen=True, slots=True)
class JobSubmissionRequest:
    """
    JobSubmissionRequest — submit frame asking the engine to backtest one strategy source.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py

    Wire shape:
    - `{action: "test", id, from, to, language, py, type, user, password}`
    """

    strategy_id: str
    user_id: UserId
    date_range: DateRange
    language: str
    source_code: str
    timeframe: Timeframe
    credential: str

    def __post_init__(self) -> None:
        if not self.strategy_id.strip():
            raise ValueError("JobSubmissionRequest.strategy_id must be non-empty")
        if not self.language.strip():
            raise ValueError("JobSubmissionRequest.language must be non-empty")
        if not self.source_code.strip():
            raise ValueError("JobSubmissionRequest.source_code must be non-empty")
        object.__setattr__(self, "strategy_id", self.strategy_id.strip())
        object.__setattr__(self, "language", self.language.strip())

    def result_request(self) -> JobResultRequest:
        """Build the result probe for the same job."""
        return JobResultRequest(
            strategy_id=self.strategy_id,
            user_id=self.user_id,
            credential=self.credential,
        )

    def to_wire(self) -> dict[str, Any]:
        date_from, date_to = self.date_range.to_wire()
        return {
            "action": ENGINE_SUBMIT_ACTION,
            "id": self.strategy_id,
            "from": date_from,
            "to": date_to,
            "language": self.language,
            "py": self.source_code,
            "type": str(self.timeframe),
            "user": str(self.user_id),
            "password": self.credential,
        }


@dataclass(frozen=True, slots=True)
class JobResultRequest:
    """
    JobResultRequest — result probe asking the engine for job status or its trade ledger.

    Wire shape:
    - `{id, action: "result", user, password}`
    """

    strategy_id: str
    user_id: UserId
    credential: str

    def __post_init__(self) -> None:
        if not self.strategy_id.strip():
            raise ValueError("JobResultRequest.strategy_id must be non-empty")
        object.__setattr__(self, "strategy_id", self.strategy_id.strip())

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.strategy_id,
            "action": ENGINE_RESULT_ACTION,
            "user": str(self.user_id),
            "password": self.credential,
        }


@dataclass(frozen=True, slots=True)
class EngineFrame:
    """
    EngineFrame — decoded engine-to-client JSON frame.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/engine_frame_codec.py

    `status` is `None` when frame has no string `status` field.
    """

    status: str | None
    error: str | None = None
    tradelog: str | None = None

    @property
    def is_ack(self) -> bool:
        return self.status == "ok"

    @property
    def is_accepted(self) -> bool:
        return self.status in ("processing", "completed")
