from __future__ import annotations

import json
from typing import Any, Mapping

from stratlab.contexts.backtest.domain.value_objects import EngineFrame


def encode_engine_frame(payload: Mapping[str, Any]) -> str:
    """
    Encode outbound engine frame as compact JSON text.

    Parameters:
    - payload: wire mapping produced by `JobSubmissionRequest.to_wire()` or
      `JobResultRequest.to_wire()`.

    Returns:
    - JSON text frame.

    Errors/Exceptions:
    - Raises `TypeError` for non-JSON-serializable payload values.
    """
    return json.dumps(dict(payload), ensure_ascii=False, separators=(",", ":"))


def decode_engine_frame(raw_frame: str | bytes) -> EngineFrame | None:
    """
    Decode inbound engine frame.

    Parameters:
    - raw_frame: text or binary websocket frame.

    Returns:
    - `EngineFrame` for JSON payloads; `None` when frame is not valid JSON text.

    Assumptions/Invariants:
    - Non-object JSON and objects without `status` yield `EngineFrame(status=None)`.
    - Non-string scalar status values are stringified.

    Errors/Exceptions:
    - None.

    Side effects:
    - None.
    """
    if isinstance(raw_frame, (bytes, bytearray)):
        try:
            raw_text = bytes(raw_frame).decode("utf-8")
        except UnicodeDecodeError:
            return None
    else:
        raw_text = raw_frame

    try:
        envelope = json.loads(raw_text)
    except json.JSONDecodeError:
        return None
    if not isinstance(envelope, dict):
        return EngineFrame(status=None)

    return EngineFrame(
        status=_optional_text(envelope.get("status")),
        error=_optional_text(envelope.get("error")),
        tradelog=envelope.get("tradelog") if isinstance(envelope.get("tradelog"), str) else None,
    )


def _optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value)
    return text if text.strip() else None
