from __future__ import annotations

import logging

from stratlab.contexts.backtest.application.dto import StrategyCodeResult
from stratlab.contexts.backtest.application.ports import SourceArtifactStore
from stratlab.contexts.backtest.application.use_cases.errors import map_backtest_exception
from stratlab.contexts.strategy.application.ports import StrategyRepository
from stratlab.contexts.strategy.application.use_cases._shared import (
    parse_user_id,
    require_owned_strategy,
)
from stratlab.platform.errors import StratlabError

log = logging.getLogger(__name__)

NO_CODE_MESSAGE = "No code file found for this strategy"


class GetStrategyCodeUseCase:
    """
    GetStrategyCodeUseCase — load owned strategy record with its persisted source artifact.

    Docs:
      - docs/architecture/backtest/backtest-source-artifacts-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/persistence/filesystem/
        source_artifact_store.py
      - apps/api/routes/strategy_code.py
    """

    def __init__(
        self,
        *,
        repository: StrategyRepository,
        artifact_store: SourceArtifactStore,
    ) -> None:
        if repository is None:  # type: ignore[truthy-bool]
            raise ValueError("GetStrategyCodeUseCase requires repository")
        if artifact_store is None:  # type: ignore[truthy-bool]
            raise ValueError("GetStrategyCodeUseCase requires artifact_store")
        self._repository = repository
        self._artifact_store = artifact_store

    async def execute(self, *, strategy_id: str, user_id: str) -> StrategyCodeResult:
        """
        Return owned record and its source code.

        Args:
            strategy_id: Strategy identifier.
            user_id: Requesting owner identifier.
        Returns:
            StrategyCodeResult: Record, code, and optional informational message.
        Assumptions:
            Missing artifact is not an error; code is empty and message explains why.
        Raises:
            StratlabError: If identifiers are blank, record is missing/forbidden,
                or artifact cannot be read.
        Side Effects:
            Reads one record and at most one artifact file.
        """
        try:
            owner = parse_user_id(raw_user_id=user_id)
            record = require_owned_strategy(
                repository=self._repository,
                strategy_id=strategy_id,
                user_id=owner,
            )
            code = await self._artifact_store.read(
                user_id=record.user_id,
                strategy_id=record.strategy_id,
            )
        except StratlabError:
            raise
        except Exception as error:  # noqa: BLE001
            raise map_backtest_exception(error=error) from error

        if code is None:
            log.info(
                "component=strategy_code status=missing strategy_id=%s user_id=%s",
                record.strategy_id,
                record.user_id,
            )
            return StrategyCodeResult(strategy=record, code="", message=NO_CODE_MESSAGE)
        return StrategyCodeResult(strategy=record, code=code)
