from __future__ import annotations

import logging

from stratlab.contexts.backtest.application.services import TradeLogFetcher, process_trade_log
from stratlab.contexts.backtest.application.use_cases.errors import map_backtest_exception
from stratlab.contexts.backtest.domain.entities import TradeLogReport
from stratlab.contexts.backtest.domain.value_objects import JobResultRequest
from stratlab.contexts.strategy.application.ports import StrategyClock, StrategyRepository
from stratlab.contexts.strategy.application.use_cases._shared import (
    ensure_utc_datetime,
    parse_user_id,
    require_owned_strategy,
)
from stratlab.platform.errors import StratlabError

log = logging.getLogger(__name__)


class FetchStrategyTradesUseCase:
    """
    FetchStrategyTradesUseCase — fetch engine trade ledger for owned strategy and summarize it.

    Docs:
      - docs/architecture/backtest/backtest-trade-log-post-processing-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/services/trade_log_fetcher.py
      - src/stratlab/contexts/backtest/application/services/trade_log_processor.py
      - apps/api/routes/trades.py
    """

    def __init__(
        self,
        *,
        repository: StrategyRepository,
        clock: StrategyClock,
        fetcher: TradeLogFetcher,
        credential: str,
    ) -> None:
        """
        Initialize trades use-case dependencies.

        Args:
            repository: Strategy Record store port.
            clock: Clock port for completion timestamps.
            fetcher: Engine trade ledger fetcher.
            credential: Engine credential attached to result probe.
        Returns:
            None.
        Assumptions:
            None.
        Raises:
            ValueError: If required dependencies are missing.
        Side Effects:
            None.
        """
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("FetchStrategyTradesUseCase requires repository")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("FetchStrategyTradesUseCase requires clock")
        if fetcher is None:  # type: ignore[truthy-bool]
            raise ValueError("FetchStrategyTradesUseCase requires fetcher")
        if credential is None:  # type: ignore[truthy-bool]
            raise ValueError("FetchStrategyTradesUseCase requires credential")
        self._repository = repository
        self._clock = clock
        self._fetcher = fetcher
        self._credential = credential

    async def execute(self, *, strategy_id: str, user_id: str) -> TradeLogReport:
        """
        Fetch, parse, and summarize trade ledger of owned strategy.

        Args:
            strategy_id: Strategy identifier.
            user_id: Requesting owner identifier.
        Returns:
            TradeLogReport: Grouped trades and ordered per-symbol summaries.
        Assumptions:
            Receiving a ledger completes a `running` record; other statuses are left as is.
        Raises:
            StratlabError: `engine_unavailable` for engine failures, owner/validation
                errors otherwise.
        Side Effects:
            Talks to engine; may update record status.
        """
        try:
            owner = parse_user_id(raw_user_id=user_id)
            record = require_owned_strategy(
                repository=self._repository,
                strategy_id=strategy_id,
                user_id=owner,
            )
            raw_ledger = await self._fetcher.fetch(
                request=JobResultRequest(
                    strategy_id=record.strategy_id,
                    user_id=record.user_id,
                    credential=self._credential,
                )
            )
            report = process_trade_log(raw_ledger)
            if record.status == "running":
                changed_at = ensure_utc_datetime(value=self._clock.now(), field_name="clock.now")
                self._repository.save(record=record.mark_completed(changed_at=changed_at))
        except StratlabError:
            raise
        except Exception as error:  # noqa: BLE001
            raise map_backtest_exception(error=error) from error

        log.info(
            "component=strategy_trades status=fetched strategy_id=%s symbols=%s trades=%s",
            record.strategy_id,
            len(report.summary),
            report.total_trades,
        )
        return report
