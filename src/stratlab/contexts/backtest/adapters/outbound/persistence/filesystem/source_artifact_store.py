from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from stratlab.contexts.backtest.domain.errors import SourceArtifactError
from stratlab.shared_kernel.primitives import UserId

log = logging.getLogger(__name__)

DEFAULT_ARTIFACT_EXTENSION = "h"
_ARTIFACT_SUBDIR = "code"


class FilesystemSourceArtifactStore:
    """
    FilesystemSourceArtifactStore — strategy source files under `<root>/code/<user>/<id>.<ext>`.

    Docs:
      - docs/architecture/backtest/backtest-source-artifacts-v1.md
    Related:
      - src/stratlab/contexts/backtest/application/ports/source_artifact_store.py
      - src/stratlab/contexts/backtest/application/services/job_submission_client.py
      - apps/api/wiring/modules/backtest.py
    """

    def __init__(self, *, root_dir: Path, extension: str = DEFAULT_ARTIFACT_EXTENSION) -> None:
        """
        Configure artifact root directory and file extension.

        Args:
            root_dir: Base directory; artifacts live under its `code/` subdirectory.
            extension: File extension without leading dot.
        Returns:
            None.
        Assumptions:
            Root directory is created lazily on first write.
        Raises:
            ValueError: If extension is blank or contains path separators.
        Side Effects:
            None.
        """
        normalized_extension = extension.strip().lstrip(".")
        if not normalized_extension:
            raise ValueError("FilesystemSourceArtifactStore requires non-empty extension")
        if _has_path_separator(normalized_extension):
            raise ValueError("FilesystemSourceArtifactStore extension must not contain separators")
        self._root_dir = Path(root_dir)
        self._extension = normalized_extension

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def artifact_path(self, *, user_id: UserId, strategy_id: str) -> Path:
        """
        Resolve artifact location for owner and strategy.

        Args:
            user_id: Strategy owner.
            strategy_id: Strategy identifier.
        Returns:
            Path: Artifact file path.
        Assumptions:
            Both identifiers are single path segments.
        Raises:
            SourceArtifactError: If an identifier is empty or escapes its directory.
        Side Effects:
            None.
        """
        user_segment = _safe_segment(value=str(user_id), field_name="user_id")
        strategy_segment = _safe_segment(value=strategy_id, field_name="strategy_id")
        return self._root_dir / _ARTIFACT_SUBDIR / user_segment / (
            f"{strategy_segment}.{self._extension}"
        )

    async def write(self, *, user_id: UserId, strategy_id: str, source_code: str) -> Path:
        path = self.artifact_path(user_id=user_id, strategy_id=strategy_id)
        try:
            await asyncio.to_thread(_write_atomically, path, source_code)
        except OSError as error:
            raise SourceArtifactError(f"cannot write {path}: {error}") from error
        log.info(
            "component=source_artifact_store status=written path=%s bytes=%s",
            path,
            len(source_code.encode("utf-8")),
        )
        return path

    async def read(self, *, user_id: UserId, strategy_id: str) -> str | None:
        path = self.artifact_path(user_id=user_id, strategy_id=strategy_id)
        try:
            return await asyncio.to_thread(_read_if_exists, path)
        except (OSError, UnicodeDecodeError) as error:
            raise SourceArtifactError(f"cannot read {path}: {error}") from error


def _write_atomically(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    descriptor, temp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


def _read_if_exists(path: Path) -> str | None:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None


def _safe_segment(*, value: str, field_name: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise SourceArtifactError(f"{field_name} must be non-empty")
    if _has_path_separator(normalized) or ".." in normalized or normalized == ".":
        raise SourceArtifactError(f"{field_name} must not contain path separators or '..'")
    return normalized


def _has_path_separator(value: str) -> bool:
    return "/" in value or "\\" in value or "\x00" in value
