from __future__ import annotations

from pathlib import Path
from typing import Protocol

from stratlab.shared_kernel.primitives import UserId


class SourceArtifactStore(Protocol):
    """
    SourceArtifactStore — persistence port for submitted strategy source code.

    Docs:
      - docs/architecture/backtest/backtest-source-artifacts-v1.md
    Related:
      - src/stratlab/contexts/backtest/adapters/outbound/persistence/filesystem/
        source_artifact_store.py
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
    """

    async def write(self, *, user_id: UserId, strategy_id: str, source_code: str) -> Path:
        """
        Persist source code verbatim, replacing previous artifact of the same strategy.

        Args:
            user_id: Strategy owner.
            strategy_id: Strategy identifier.
            source_code: Source text.
        Returns:
            Path: Location of written artifact.
        Assumptions:
            Key is `(user_id, strategy_id)`.
        Raises:
            SourceArtifactError: If artifact cannot be written.
        Side Effects:
            Writes one file.
        """
        ...

    async def read(self, *, user_id: UserId, strategy_id: str) -> str | None:
        """
        Load persisted source code.

        Args:
            user_id: Strategy owner.
            strategy_id: Strategy identifier.
        Returns:
            str | None: Source text or `None` when no artifact exists.
        Assumptions:
            None.
        Raises:
            SourceArtifactError: If artifact exists but cannot be read.
        Side Effects:
            Reads one file.
        """
        ...
