from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from stratlab.contexts.backtest.adapters.outbound import FilesystemSourceArtifactStore
from stratlab.contexts.backtest.domain.errors import SourceArtifactError
from stratlab.shared_kernel.primitives import UserId


def test_write_persists_verbatim_source_and_overwrites_on_resubmission(tmp_path: Path) -> None:
    """
    Verify artifact layout `<root>/code/<user>/<id>.h`, verbatim content, and overwrite.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Default extension is `h`.
    Raises:
        AssertionError: If layout or content differs from contract.
    Side Effects:
        Writes files under temporary directory.
    """
    store = FilesystemSourceArtifactStore(root_dir=tmp_path)
    user_id = UserId("user-1")

    first = asyncio.run(store.write(user_id=user_id, strategy_id="s-1", source_code="a\r\nb"))
    second = asyncio.run(store.write(user_id=user_id, strategy_id="s-1", source_code="// v2 ü"))

    assert first == second == tmp_path / "code" / "user-1" / "s-1.h"
    assert second.read_bytes() == "// v2 ü".encode("utf-8")
    assert asyncio.run(store.read(user_id=user_id, strategy_id="s-1")) == "// v2 ü"
    assert sorted(path.name for path in second.parent.iterdir()) == ["s-1.h"]


def test_read_missing_artifact_returns_none(tmp_path: Path) -> None:
    store = FilesystemSourceArtifactStore(root_dir=tmp_path, extension=".py")

    assert store.artifact_path(user_id=UserId("u"), strategy_id="s") == tmp_path / "code" / "u" / "s.py"
    assert asyncio.run(store.read(user_id=UserId("u"), strategy_id="s")) is None


@pytest.mark.parametrize("strategy_id", ["", "../escape", "a/b", "a\\b", ".", "x..y"])
def test_unsafe_strategy_identifiers_are_rejected(tmp_path: Path, strategy_id: str) -> None:
    store = FilesystemSourceArtifactStore(root_dir=tmp_path)

    with pytest.raises(SourceArtifactError):
        asyncio.run(store.write(user_id=UserId("u"), strategy_id=strategy_id, source_code="x"))
    assert not (tmp_path / "code").exists()


def test_unsafe_user_identifier_is_rejected(tmp_path: Path) -> None:
    store = FilesystemSourceArtifactStore(root_dir=tmp_path)

    with pytest.raises(SourceArtifactError):
        store.artifact_path(user_id=UserId(".."), strategy_id="s-1")


def test_write_failure_is_reported_as_source_artifact_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file", encoding="utf-8")
    store = FilesystemSourceArtifactStore(root_dir=blocker)

    with pytest.raises(SourceArtifactError, match="cannot write"):
        asyncio.run(store.write(user_id=UserId("u"), strategy_id="s-1", source_code="x"))


def test_store_rejects_blank_extension(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        FilesystemSourceArtifactStore(root_dir=tmp_path, extension=" . ")
