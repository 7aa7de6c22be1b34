from __future__ import annotations

import asyncio
import logging

from stratlab.contexts.backtest.application.ports import EngineConnector
from stratlab.contexts.backtest.application.services.engine_frame_codec import (
    decode_engine_frame,
    encode_engine_frame,
)
from stratlab.contexts.backtest.domain.errors import (
    EngineProtocolError,
    EngineRejectedError,
    EngineTimeoutError,
    EngineTransportError,
)
from stratlab.contexts.backtest.domain.value_objects import JobResultRequest

log = logging.getLogger(__name__)

_PENDING_STATUSES = frozenset({"ok", "processing", "completed"})


class TradeLogFetcher:
    """
    Fetches the raw trade ledger of a finished engine job via one result probe.

    Parameters:
    - connector: factory of exclusively owned engine connections.
    - result_timeout_s: deadline of the whole exchange (open, probe, ledger frame).

    Assumptions/Invariants:
    - Ledger arrives as string field `tradelog` of a JSON frame.
    - Status-only frames (`ok`, `processing`, `completed`) are skipped while waiting.
    """

    def __init__(self, *, connector: EngineConnector, result_timeout_s: float) -> None:
        if connector is None:  # type: ignore[truthy-bool]
            raise ValueError("TradeLogFetcher requires connector")
        if result_timeout_s <= 0:
            raise ValueError("TradeLogFetcher requires result_timeout_s > 0")
        self._connector = connector
        self._result_timeout_s = result_timeout_s

    async def fetch(self, *, request: JobResultRequest) -> str:
        """
        Send result probe and return ledger text.

        Parameters:
        - request: result probe for the strategy job.

        Returns:
        - Raw ledger string, possibly empty.

        Errors/Exceptions:
        - `EngineTimeoutError` when no ledger arrives within the result timeout.
        - `EngineRejectedError` for non-pending engine status frames.
        - `EngineProtocolError` for non-JSON frames.
        - `EngineTransportError` for connection failures.

        Side effects:
        - Opens and closes one engine connection.
        """
        try:
            return await asyncio.wait_for(
                self._exchange(request=request),
                timeout=self._result_timeout_s,
            )
        except asyncio.TimeoutError as error:
            raise EngineTimeoutError(
                f"engine result timeout after {self._result_timeout_s:g}s"
            ) from error

    async def _exchange(self, *, request: JobResultRequest) -> str:
        connection = await self._connector.open()
        try:
            await connection.send(encode_engine_frame(request.to_wire()))
            while True:
                frame = decode_engine_frame(await connection.recv())
                if frame is None:
                    raise EngineProtocolError("engine sent non-JSON frame")
                if frame.tradelog is not None:
                    log.info(
                        "component=trade_log_fetcher status=received strategy_id=%s bytes=%s",
                        request.strategy_id,
                        len(frame.tradelog),
                    )
                    return frame.tradelog
                if frame.status is None:
                    raise EngineProtocolError("engine frame has neither status nor tradelog")
                if frame.status not in _PENDING_STATUSES or frame.error:
                    raise EngineRejectedError(status=frame.status, error=frame.error)
        finally:
            try:
                await connection.close()
            except EngineTransportError:
                log.warning("component=trade_log_fetcher status=close_failed", exc_info=True)
