from __future__ import annotations

from typing import Protocol


class EngineConnection(Protocol):
    """
    EngineConnection — one open bidirectional text-frame channel to the execution engine.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/clients/engine_ws/engine_connector.py
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
    """

    async def send(self, payload: str) -> None:
        """
        Send one text frame.

        Args:
            payload: Encoded JSON frame.
        Returns:
            None.
        Assumptions:
            Connection is open.
        Raises:
            EngineConnectionClosedError: If peer closed the connection.
            EngineTransportError: If frame cannot be sent.
        Side Effects:
            Writes one frame to network.
        """
        ...

    async def recv(self) -> str | bytes:
        """
        Receive next inbound frame as text.

        Args:
            None.
        Returns:
            str | bytes: Raw text frame, or binary frame as received.
        Assumptions:
            Cancelling a pending receive leaves connection usable.
        Raises:
            EngineConnectionClosedError: If peer closed the connection.
            EngineTransportError: If connection broke.
        Side Effects:
            Reads one frame from network.
        """
        ...

    async def close(self) -> None:
        """
        Close connection with normal close code.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Closing an already closed connection is a no-op.
        Raises:
            EngineTransportError: If close handshake fails.
        Side Effects:
            Releases network connection.
        """
        ...


class EngineConnector(Protocol):
    """
    EngineConnector — factory opening fresh, exclusively owned engine connections.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/clients/engine_ws/engine_connector.py
    """

    async def open(self) -> EngineConnection:
        """
        Open new engine connection.

        Args:
            None.
        Returns:
            EngineConnection: Ready connection.
        Assumptions:
            Caller bounds the call with its connect deadline.
        Raises:
            EngineTransportError: If connection cannot be established.
        Side Effects:
            Opens one network connection.
        """
        ...
