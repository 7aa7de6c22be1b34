from .engine_frames import (
    ENGINE_RESULT_ACTION,
    ENGINE_SUBMIT_ACTION,
    EngineFrame,
    JobResultRequest,
    JobSubmissionRequest,
)
from .engine_timeouts import EngineTimeouts
from .submission_result import JobSubmissionResult, SubmissionFailure, SubmissionFailureKind

__all__ = [
    "ENGINE_RESULT_ACTION",
    "ENGINE_SUBMIT_ACTION",
    "EngineFrame",
    "EngineTimeouts",
    "JobResultRequest",
    "JobSubmissionRequest",
    "JobSubmissionResult",
    "SubmissionFailure",
    "SubmissionFailureKind",
]
