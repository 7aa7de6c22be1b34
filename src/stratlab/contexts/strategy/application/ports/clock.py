from __future__ import annotations

from datetime import datetime
from typing import Protocol


class StrategyClock(Protocol):
    """
    StrategyClock — application port providing timezone-aware UTC timestamps for record updates.

    Docs:
      - docs/architecture/strategy/strategy-record-store-v1.md
    Related:
      - src/stratlab/contexts/strategy/adapters/outbound/time/system_strategy_clock.py
      - src/stratlab/contexts/backtest/application/use_cases/submit_backtest.py
    """

    def now(self) -> datetime:
        """
        Return current timezone-aware UTC timestamp.

        Args:
            None.
        Returns:
            datetime: Current UTC timestamp.
        Assumptions:
            Returned datetime has zero UTC offset.
        Raises:
            ValueError: If implementation cannot provide valid UTC datetime.
        Side Effects:
            None.
        """
        ...
