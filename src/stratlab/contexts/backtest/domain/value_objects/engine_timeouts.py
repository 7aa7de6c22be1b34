from __future__ import annotations

from dataclasses import dataclass

CONNECT_TIMEOUT_S_DEFAULT = 10.0
STATUS_TIMEOUT_S_DEFAULT = 15.0
SETTLE_DELAY_S_DEFAULT = 5.0
RESULT_TIMEOUT_S_DEFAULT = 15.0


@dataclass(frozen=True, slots=True)
class EngineTimeouts:
    """
    EngineTimeouts — named deadlines of the engine submission handshake.

    Docs:
      - docs/architecture/backtest/backtest-job-submission-protocol-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/config/backtest_engine_runtime_config.py
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py

    Fields:
    - connect_timeout_s: T1, open connection plus first inbound frame.
    - status_timeout_s: T2, wait for terminal status after `ok` acknowledgement.
    - settle_delay_s: D, delay after `ok` before sending the result probe.
    - result_timeout_s: whole trade ledger fetch exchange.
    """

    connect_timeout_s: float = CONNECT_TIMEOUT_S_DEFAULT
    status_timeout_s: float = STATUS_TIMEOUT_S_DEFAULT
    settle_delay_s: float = SETTLE_DELAY_S_DEFAULT
    result_timeout_s: float = RESULT_TIMEOUT_S_DEFAULT

    def __post_init__(self) -> None:
        """
        Validate deadline values.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Settle delay may exceed status timeout; then the probe is never sent.
        Raises:
            ValueError: If one of timeouts is not positive or settle delay is negative.
        Side Effects:
            None.
        """
        if self.connect_timeout_s <= 0:
            raise ValueError("backtest_engine.timeouts.connect_timeout_s must be > 0")
        if self.status_timeout_s <= 0:
            raise ValueError("backtest_engine.timeouts.status_timeout_s must be > 0")
        if self.settle_delay_s < 0:
            raise ValueError("backtest_engine.timeouts.settle_delay_s must be >= 0")
        if self.result_timeout_s <= 0:
            raise ValueError("backtest_engine.timeouts.result_timeout_s must be > 0")
