from __future__ import annotations

import json
from datetime import date

from stratlab.contexts.backtest.application.services import (
    decode_engine_frame,
    encode_engine_frame,
)
from stratlab.contexts.backtest.domain.value_objects import (
    EngineFrame,
    JobSubmissionRequest,
)
from stratlab.shared_kernel.primitives import DateRange, Timeframe, UserId


def test_submit_frame_uses_engine_wire_field_names() -> None:
    """
    Verify submit request is encoded with engine wire keys and ISO dates.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Engine expects `py` for source and `type` for timeframe.
    Raises:
        AssertionError: If wire shape differs from protocol.
    Side Effects:
        None.
    """
    request = JobSubmissionRequest(
        strategy_id="s-1",
        user_id=UserId("user-1"),
        date_range=DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31)),
        language="cpp",
        source_code="int main() { return 0; }",
        timeframe=Timeframe("bnf.c5m"),
        credential="secret",
    )

    submit = json.loads(encode_engine_frame(request.to_wire()))
    probe = json.loads(encode_engine_frame(request.result_request().to_wire()))

    assert submit == {
        "action": "test",
        "id": "s-1",
        "from": "2024-01-01",
        "to": "2024-01-31",
        "language": "cpp",
        "py": "int main() { return 0; }",
        "type": "bnf.c5m",
        "user": "user-1",
        "password": "secret",
    }
    assert probe == {"id": "s-1", "action": "result", "user": "user-1", "password": "secret"}


def test_decode_engine_frame_reads_status_error_and_tradelog() -> None:
    assert decode_engine_frame('{"status":"error","error":"compile failed"}') == EngineFrame(
        status="error",
        error="compile failed",
    )
    assert decode_engine_frame(b'{"tradelog":"1,A"}') == EngineFrame(status=None, tradelog="1,A")
    assert decode_engine_frame('{"status": 200}') == EngineFrame(status="200")


def test_decode_engine_frame_distinguishes_non_json_from_statusless_json() -> None:
    assert decode_engine_frame("Job accepted") is None
    assert decode_engine_frame(b"\xff\xfe") is None
    assert decode_engine_frame("[1, 2]") == EngineFrame(status=None)
    assert decode_engine_frame('{"status": {"nested": true}}') == EngineFrame(status=None)
