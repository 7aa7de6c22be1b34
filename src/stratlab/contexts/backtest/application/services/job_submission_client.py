from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from stratlab.contexts.backtest.application.ports import (
    EngineConnection,
    EngineConnector,
    SourceArtifactStore,
)
from stratlab.contexts.backtest.application.services.engine_frame_codec import (
    decode_engine_frame,
    encode_engine_frame,
)
from stratlab.contexts.backtest.domain.errors import (
    EngineConnectionClosedError,
    EngineProtocolError,
    EngineRejectedError,
    EngineTimeoutError,
    EngineTransportError,
    SourceArtifactError,
)
from stratlab.contexts.backtest.domain.value_objects import (
    EngineFrame,
    EngineTimeouts,
    JobSubmissionRequest,
    JobSubmissionResult,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JobSubmissionHooks:
    """
    Optional metric/logging hooks for engine submission attempts.

    Parameters:
    - on_attempt_finished: callback invoked with terminal result and attempt duration seconds.
    - on_frame_received: callback invoked for every inbound engine frame.
    - on_probe_sent: callback invoked when the result probe is sent after `ok`.
    """

    on_attempt_finished: Callable[[JobSubmissionResult, float], None] | None = None
    on_frame_received: Callable[[], None] | None = None
    on_probe_sent: Callable[[], None] | None = None


@dataclass(frozen=True, slots=True)
class _ExchangeOutcome:
    engine_status: str | None
    persist_artifact: bool


class JobSubmissionClient:
    """
    Drives one submit -> acknowledge -> poll handshake with the execution engine per call.

    Parameters:
    - connector: factory of exclusively owned engine connections.
    - artifact_store: persistence for accepted strategy source code.
    - timeouts: T1/T2/D handshake deadlines.
    - strict_status_frames: reject non-JSON or status-less frames instead of accepting.
    - hooks: optional metrics/logging hooks.
    - monotonic: clock used for attempt duration measurement.

    Assumptions/Invariants:
    - Each `submit` call ends in exactly one `JobSubmissionResult`.
    - The connection is closed exactly once per attempt, before the artifact write.
    - Source artifact is written only after engine reports `processing` or `completed`.
    """

    def __init__(
        self,
        *,
        connector: EngineConnector,
        artifact_store: SourceArtifactStore,
        timeouts: EngineTimeouts,
        strict_status_frames: bool = False,
        hooks: JobSubmissionHooks | None = None,
        monotonic: Callable[[], float] | None = None,
    ) -> None:
        """
        Validate constructor arguments and store collaborators.

        Parameters:
        - See class-level documentation.

        Returns:
        - None.

        Errors/Exceptions:
        - Raises `ValueError` when a required dependency is missing.

        Side effects:
        - None.
        """
        if connector is None:  # type: ignore[truthy-bool]
            raise ValueError("JobSubmissionClient requires connector")
        if artifact_store is None:  # type: ignore[truthy-bool]
            raise ValueError("JobSubmissionClient requires artifact_store")
        if timeouts is None:  # type: ignore[truthy-bool]
            raise ValueError("JobSubmissionClient requires timeouts")

        self._connector = connector
        self._artifact_store = artifact_store
        self._timeouts = timeouts
        self._strict_status_frames = strict_status_frames
        self._hooks = hooks if hooks is not None else JobSubmissionHooks()
        self._monotonic = monotonic if monotonic is not None else time.monotonic

    async def submit(self, *, request: JobSubmissionRequest) -> JobSubmissionResult:
        """
        Run one submission attempt and return its terminal outcome.

        Parameters:
        - request: submit frame contents including source code and credential.

        Returns:
        - `JobSubmissionResult`, accepted or carrying a classified failure.

        Assumptions/Invariants:
        - Lenient non-JSON acknowledgement finishes the attempt without artifact write.

        Errors/Exceptions:
        - Does not raise for protocol, transport, or artifact failures.
        - Propagates `asyncio.CancelledError`.

        Side effects:
        - Opens and closes one engine connection.
        - Writes source artifact on acceptance.
        """
        started_at = self._monotonic()
        try:
            outcome = await self._exchange(request=request)
            artifact_path: Path | None = None
            if outcome.persist_artifact:
                artifact_path = await self._artifact_store.write(
                    user_id=request.user_id,
                    strategy_id=request.strategy_id,
                    source_code=request.source_code,
                )
            result = JobSubmissionResult.done(
                strategy_id=request.strategy_id,
                engine_status=outcome.engine_status,
                artifact_path=artifact_path,
            )
        except asyncio.CancelledError:
            raise
        except Exception as error:  # noqa: BLE001
            result = _failure_result(strategy_id=request.strategy_id, error=error)

        duration_s = max(0.0, self._monotonic() - started_at)
        if result.accepted:
            log.info(
                "component=job_submission status=accepted strategy_id=%s engine_status=%s "
                "artifact=%s duration_s=%.3f",
                result.strategy_id,
                result.engine_status,
                result.artifact_path,
                duration_s,
            )
        else:
            log.warning(
                "component=job_submission status=failed strategy_id=%s kind=%s reason=%s "
                "duration_s=%.3f",
                result.strategy_id,
                result.failure.kind if result.failure is not None else None,
                result.reason,
                duration_s,
            )
        if self._hooks.on_attempt_finished is not None:
            self._hooks.on_attempt_finished(result, duration_s)
        return result

    async def _exchange(self, *, request: JobSubmissionRequest) -> _ExchangeOutcome:
        loop = asyncio.get_running_loop()
        connect_deadline = loop.time() + self._timeouts.connect_timeout_s
        connection = await self._open(deadline=connect_deadline)
        try:
            await connection.send(encode_engine_frame(request.to_wire()))
            log.debug("component=job_submission stage=submitted strategy_id=%s", request.strategy_id)

            try:
                raw_frame = await asyncio.wait_for(
                    connection.recv(),
                    timeout=max(0.0, connect_deadline - loop.time()),
                )
            except asyncio.TimeoutError as error:
                raise EngineTimeoutError(
                    f"engine connect timeout after {self._timeouts.connect_timeout_s:g}s"
                ) from error
            self._emit_frame_received()

            frame = decode_engine_frame(raw_frame)
            if frame is not None and frame.is_ack:
                return await self._await_processing(connection=connection, request=request)
            return self._terminal_outcome(frame=frame)
        finally:
            await _close_connection(connection)

    async def _open(self, *, deadline: float) -> EngineConnection:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                self._connector.open(),
                timeout=max(0.0, deadline - loop.time()),
            )
        except asyncio.TimeoutError as error:
            raise EngineTimeoutError(
                f"engine connect timeout after {self._timeouts.connect_timeout_s:g}s"
            ) from error

    async def _await_processing(
        self,
        *,
        connection: EngineConnection,
        request: JobSubmissionRequest,
    ) -> _ExchangeOutcome:
        """
        Wait for terminal status after `ok`, sending one result probe after settle delay.

        Parameters:
        - connection: open engine connection.
        - request: submitted job request used to build the probe.

        Returns:
        - Exchange outcome once engine reports a terminal status.

        Assumptions/Invariants:
        - Repeated `ok` frames are ignored.
        - Probe is sent at most once.

        Errors/Exceptions:
        - Raises `EngineTimeoutError` when T2 elapses without terminal status.
        - Raises engine errors for rejected or malformed frames.
        """
        loop = asyncio.get_running_loop()
        acked_at = loop.time()
        status_deadline = acked_at + self._timeouts.status_timeout_s
        probe_at = acked_at + self._timeouts.settle_delay_s
        probe_sent = False

        while True:
            now = loop.time()
            if not probe_sent and now >= probe_at:
                await connection.send(encode_engine_frame(request.result_request().to_wire()))
                probe_sent = True
                if self._hooks.on_probe_sent is not None:
                    self._hooks.on_probe_sent()
                log.debug(
                    "component=job_submission stage=probe_sent strategy_id=%s",
                    request.strategy_id,
                )
                continue
            if now >= status_deadline:
                raise EngineTimeoutError(
                    f"engine status check timeout after {self._timeouts.status_timeout_s:g}s"
                )

            wake_at = status_deadline if probe_sent else min(probe_at, status_deadline)
            try:
                raw_frame = await asyncio.wait_for(connection.recv(), timeout=wake_at - now)
            except asyncio.TimeoutError:
                continue
            self._emit_frame_received()

            frame = decode_engine_frame(raw_frame)
            if frame is not None and frame.is_ack:
                continue
            return self._terminal_outcome(frame=frame)

    def _terminal_outcome(self, *, frame: EngineFrame | None) -> _ExchangeOutcome:
        if frame is None:
            if self._strict_status_frames:
                raise EngineProtocolError("engine sent non-JSON frame")
            return _ExchangeOutcome(engine_status=None, persist_artifact=False)
        if frame.status is None:
            if frame.error:
                raise EngineProtocolError(f"engine frame has no status: {frame.error}")
            raise EngineProtocolError("engine frame has no status")
        if frame.is_accepted:
            return _ExchangeOutcome(engine_status=frame.status, persist_artifact=True)
        raise EngineRejectedError(status=frame.status, error=frame.error)

    def _emit_frame_received(self) -> None:
        if self._hooks.on_frame_received is not None:
            self._hooks.on_frame_received()


def _failure_result(*, strategy_id: str, error: Exception) -> JobSubmissionResult:
    """
    Classify attempt failure into structured result.

    Parameters:
    - strategy_id: submitted strategy identifier.
    - error: exception raised during the attempt.

    Returns:
    - Rejected `JobSubmissionResult`.
    """
    if isinstance(error, EngineTimeoutError):
        return JobSubmissionResult.failed(strategy_id=strategy_id, kind="timeout", reason=str(error))
    if isinstance(error, EngineConnectionClosedError) and error.is_normal:
        return JobSubmissionResult.failed(
            strategy_id=strategy_id,
            kind="transport",
            reason="engine closed connection before job was accepted",
        )
    if isinstance(error, EngineTransportError):
        return JobSubmissionResult.failed(
            strategy_id=strategy_id,
            kind="transport",
            reason=str(error) or "engine transport error",
        )
    if isinstance(error, EngineRejectedError):
        return JobSubmissionResult.failed(
            strategy_id=strategy_id,
            kind="engine_rejected",
            reason=str(error),
            engine_status=error.status,
        )
    if isinstance(error, EngineProtocolError):
        return JobSubmissionResult.failed(strategy_id=strategy_id, kind="protocol", reason=str(error))
    if isinstance(error, SourceArtifactError):
        return JobSubmissionResult.failed(
            strategy_id=strategy_id,
            kind="artifact_write",
            reason=f"artifact write error: {error}",
        )

    log.exception("component=job_submission status=unexpected_error strategy_id=%s", strategy_id)
    return JobSubmissionResult.failed(
        strategy_id=strategy_id,
        kind="unexpected",
        reason=f"unexpected submission error: {type(error).__name__}: {error}",
    )


async def _close_connection(connection: EngineConnection) -> None:
    try:
        await connection.close()
    except EngineTransportError:
        log.warning("component=job_submission status=close_failed", exc_info=True)
