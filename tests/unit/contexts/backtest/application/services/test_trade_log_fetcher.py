from __future__ import annotations

import asyncio
import json

import pytest

from stratlab.contexts.backtest.application.services import TradeLogFetcher
from stratlab.contexts.backtest.domain.errors import (
    EngineProtocolError,
    EngineRejectedError,
    EngineTimeoutError,
)
from stratlab.contexts.backtest.domain.value_objects import JobResultRequest
from stratlab.shared_kernel.primitives import UserId


class _ReplayConnection:
    """
    Fake engine connection returning queued frames; empty queue blocks forever.
    """

    def __init__(self, frames) -> None:
        self._inbox: asyncio.Queue = asyncio.Queue()
        for frame in frames:
            self._inbox.put_nowait(frame)
        self.sent: list[dict] = []
        self.close_calls = 0

    async def send(self, payload: str) -> None:
        self.sent.append(json.loads(payload))

    async def recv(self) -> str:
        return await self._inbox.get()

    async def close(self) -> None:
        self.close_calls += 1


class _Connector:
    def __init__(self, connection: _ReplayConnection) -> None:
        self._connection = connection

    async def open(self) -> _ReplayConnection:
        return self._connection


def _fetch(connection: _ReplayConnection, *, timeout_s: float = 0.2) -> str:
    fetcher = TradeLogFetcher(connector=_Connector(connection), result_timeout_s=timeout_s)
    return asyncio.run(
        fetcher.fetch(
            request=JobResultRequest(strategy_id="s-9", user_id=UserId("user-1"), credential="pw")
        )
    )


def test_fetch_skips_pending_statuses_and_returns_ledger() -> None:
    """
    Verify fetcher sends result probe, skips pending frames, and returns `tradelog` text.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Ledger may arrive after one or more status frames.
    Raises:
        AssertionError: If probe or ledger extraction differs from protocol.
    Side Effects:
        None.
    """
    connection = _ReplayConnection(
        ['{"status":"processing"}', '{"status":"completed"}', '{"tradelog":"1,BTC"}']
    )

    ledger = _fetch(connection)

    assert ledger == "1,BTC"
    assert connection.sent == [{"id": "s-9", "action": "result", "user": "user-1", "password": "pw"}]
    assert connection.close_calls == 1


def test_fetch_raises_for_rejected_status_and_non_json() -> None:
    rejected = _ReplayConnection(['{"status":"error","error":"unknown strategy"}'])
    garbage = _ReplayConnection(["not json"])

    with pytest.raises(EngineRejectedError, match="error: unknown strategy"):
        _fetch(rejected)
    with pytest.raises(EngineProtocolError):
        _fetch(garbage)

    assert rejected.close_calls == 1
    assert garbage.close_calls == 1


def test_fetch_times_out_when_ledger_never_arrives() -> None:
    connection = _ReplayConnection(['{"status":"processing"}'])

    with pytest.raises(EngineTimeoutError, match="engine result timeout after 0.05s"):
        _fetch(connection, timeout_s=0.05)

    assert connection.close_calls == 1


def test_fetcher_requires_positive_timeout() -> None:
    with pytest.raises(ValueError):
        TradeLogFetcher(connector=_Connector(_ReplayConnection([])), result_timeout_s=0)
