from __future__ import annotations

import logging
import ssl

import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from stratlab.contexts.backtest.application.ports import EngineConnection
from stratlab.contexts.backtest.domain.errors import (
    EngineConnectionClosedError,
    EngineTransportError,
)

log = logging.getLogger(__name__)

_NORMAL_CLOSE_CODE = 1000
_ABNORMAL_CLOSE_CODE = 1006


class WebsocketsEngineConnector:
    """
    Opens fresh `websockets` client connections to the execution engine.

    Parameters:
    - url: engine endpoint (`ws://` or `wss://`).
    - verify_tls: verify engine certificate and hostname for `wss://` endpoints.
    - ping_interval_s: websocket keepalive ping interval, `None` disables pings.
    - close_timeout_s: bound of the closing handshake.

    Assumptions/Invariants:
    - Open deadline is enforced by the caller; no library-level open timeout is applied.
    - Every returned connection is owned by exactly one submission attempt.
    """

    def __init__(
        self,
        *,
        url: str,
        verify_tls: bool,
        ping_interval_s: float | None = None,
        close_timeout_s: float = 5.0,
    ) -> None:
        if not url.strip():
            raise ValueError("WebsocketsEngineConnector requires url")
        if not url.startswith(("ws://", "wss://")):
            raise ValueError(f"WebsocketsEngineConnector url must be ws:// or wss://, got {url!r}")
        if close_timeout_s <= 0:
            raise ValueError("WebsocketsEngineConnector requires close_timeout_s > 0")
        self._url = url.strip()
        self._verify_tls = verify_tls
        self._ping_interval_s = ping_interval_s
        self._close_timeout_s = close_timeout_s

    @property
    def url(self) -> str:
        return self._url

    async def open(self) -> EngineConnection:
        """
        Open new engine connection.

        Returns:
        - `WebsocketsEngineConnection` wrapping an established websocket.

        Errors/Exceptions:
        - `EngineTransportError` when DNS, TCP, TLS or the websocket handshake fails.

        Side effects:
        - Opens one network connection.
        """
        try:
            socket = await websockets.connect(
                self._url,
                ssl=build_engine_ssl_context(url=self._url, verify_tls=self._verify_tls),
                open_timeout=None,
                ping_interval=self._ping_interval_s,
                close_timeout=self._close_timeout_s,
                max_size=None,
            )
        except (OSError, InvalidHandshake, InvalidURI) as error:
            raise EngineTransportError(f"engine connection failed: {error}") from error
        log.debug("component=engine_connector status=connected url=%s", self._url)
        return WebsocketsEngineConnection(socket)


class WebsocketsEngineConnection:
    """
    Engine connection adapter mapping `websockets` errors to engine transport errors.

    Parameters:
    - socket: established websocket client connection.
    """

    def __init__(self, socket) -> None:  # type: ignore[no-untyped-def]
        self._socket = socket

    async def send(self, payload: str) -> None:
        try:
            await self._socket.send(payload)
        except ConnectionClosed as error:
            raise closed_error(error) from error
        except OSError as error:
            raise EngineTransportError(f"engine send failed: {error}") from error

    async def recv(self) -> str | bytes:
        try:
            return await self._socket.recv()
        except ConnectionClosed as error:
            raise closed_error(error) from error
        except OSError as error:
            raise EngineTransportError(f"engine receive failed: {error}") from error

    async def close(self) -> None:
        try:
            await self._socket.close(code=_NORMAL_CLOSE_CODE)
        except OSError as error:
            raise EngineTransportError(f"engine close failed: {error}") from error


def build_engine_ssl_context(*, url: str, verify_tls: bool) -> ssl.SSLContext | None:
    """
    Build TLS context for engine endpoint.

    Parameters:
    - url: engine endpoint.
    - verify_tls: whether certificate chain and hostname are verified.

    Returns:
    - `None` for plain `ws://`, otherwise client TLS context.

    Assumptions/Invariants:
    - `verify_tls=False` accepts self-signed engine certificates.
    """
    if not url.startswith("wss://"):
        return None
    context = ssl.create_default_context()
    if not verify_tls:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def closed_error(error: ConnectionClosed) -> EngineConnectionClosedError:
    """
    Convert library close exception into engine close error.

    Parameters:
    - error: `websockets` close exception.

    Returns:
    - `EngineConnectionClosedError` with received close code, or `1006` when the
      peer vanished without a close frame.
    """
    received = error.rcvd
    if received is None:
        return EngineConnectionClosedError(code=_ABNORMAL_CLOSE_CODE, reason="")
    return EngineConnectionClosedError(code=received.code, reason=received.reason)
