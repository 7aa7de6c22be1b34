from .engine_frame_codec import decode_engine_frame, encode_engine_frame
from .job_submission_client import JobSubmissionClient, JobSubmissionHooks
from .submission_guard import SubmissionGuard
from .trade_log_fetcher import TradeLogFetcher
from .trade_log_processor import parse_trade_line, process_trade_log

__all__ = [
    "JobSubmissionClient",
    "JobSubmissionHooks",
    "SubmissionGuard",
    "TradeLogFetcher",
    "decode_engine_frame",
    "encode_engine_frame",
    "parse_trade_line",
    "process_trade_log",
]
