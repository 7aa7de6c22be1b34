from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from itertools import count
from pathlib import Path

from fastapi.testclient import TestClient

from apps.api.main.app import create_app
from stratlab.contexts.strategy.adapters.outbound import InMemoryStrategyRepository
from stratlab.contexts.strategy.domain.entities import StrategyDraft
from stratlab.shared_kernel.primitives import DateRange, Timeframe, UserId

_T0 = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class _StepClock:
    def __init__(self) -> None:
        self._ticks = count(1)

    def now(self) -> datetime:
        return _T0 + timedelta(minutes=next(self._ticks))


class _UnusedConnector:
    async def open(self):  # type: ignore[no-untyped-def]
        raise AssertionError("strategy routes must not contact the engine")


def _seeded_client(tmp_path: Path) -> tuple[TestClient, InMemoryStrategyRepository]:
    """
    Build app over repository seeded with two records of `user-1` and one of `user-2`.

    Args:
        tmp_path: Pytest temporary directory for engine config.
    Returns:
        tuple[TestClient, InMemoryStrategyRepository]: Client and shared repository.
    Assumptions:
        Identifiers are assigned sequentially as `s-1`, `s-2`, `s-3`.
    Raises:
        None.
    Side Effects:
        Writes one config file under `tmp_path`.
    """
    ids = count(1)
    repository = InMemoryStrategyRepository(id_factory=lambda: f"s-{next(ids)}")
    for index, (name, user) in enumerate((("Alpha", "user-1"), ("Beta", "user-1"), ("Gamma", "user-2"))):
        repository.create(
            draft=StrategyDraft(
                name=name,
                user_id=UserId(user),
                initial_equity=1000.0,
                timeframe=Timeframe("c15m"),
                date_range=DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31)),
            ),
            created_at=_T0 + timedelta(seconds=index),
        )
    config_path = tmp_path / "backtest_engine.yaml"
    config_path.write_text("version: 1\nbacktest_engine:\n  url: ws://127.0.0.1:1\n", encoding="utf-8")
    app = create_app(
        environ={"STRATLAB_ENV": "test", "STRATLAB_BACKTEST_ENGINE_CONFIG": str(config_path)},
        engine_connector=_UnusedConnector(),
        repository=repository,
        clock=_StepClock(),
    )
    return TestClient(app, raise_server_exceptions=False), repository


def test_list_strategies_returns_owner_records_in_requested_order(tmp_path: Path) -> None:
    client, _ = _seeded_client(tmp_path)

    newest_first = client.get("/strategies", params={"user_id": "user-1"})
    by_name = client.get(
        "/strategies",
        params={"user_id": "user-1", "order_by": "name", "direction": "asc", "limit": 1},
    )

    assert newest_first.status_code == 200
    assert [item["strategy_id"] for item in newest_first.json()] == ["s-2", "s-1"]
    assert [item["name"] for item in by_name.json()] == ["Alpha"]
    assert newest_first.json()[0]["date_range"] == {"from": "2024-01-01", "to": "2024-01-31"}


def test_list_strategies_validates_query(tmp_path: Path) -> None:
    client, _ = _seeded_client(tmp_path)

    missing_user = client.get("/strategies")
    bad_status = client.get("/strategies", params={"user_id": "user-1", "status": "paused"})

    assert missing_user.status_code == 422
    assert missing_user.json()["error"]["details"]["errors"][0]["path"] == "query.user_id"
    assert bad_status.status_code == 422


def test_get_strategy_enforces_ownership(tmp_path: Path) -> None:
    client, _ = _seeded_client(tmp_path)

    owned = client.get("/strategies/s-1", params={"user_id": "user-1"})
    foreign = client.get("/strategies/s-3", params={"user_id": "user-1"})
    missing = client.get("/strategies/s-404", params={"user_id": "user-1"})

    assert owned.status_code == 200
    assert owned.json()["status"] == "draft"
    assert foreign.status_code == 403
    assert missing.status_code == 404
    assert missing.json() == {
        "error": {
            "code": "not_found",
            "message": "Strategy was not found",
            "details": {"strategy_id": "s-404"},
        }
    }


def test_put_strategy_applies_whitelisted_edits(tmp_path: Path) -> None:
    """
    Verify PUT edits name, equity, timeframe, and one date bound while keeping others.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Omitted `to` bound keeps stored value.
    Raises:
        AssertionError: If edit semantics differ from contract.
    Side Effects:
        None.
    """
    client, repository = _seeded_client(tmp_path)

    response = client.put(
        "/strategies/s-1",
        params={"user_id": "user-1"},
        json={
            "name": "  Alpha v2 ",
            "initial_equity": 2500,
            "timeframe": "c4h",
            "date_range": {"from": "2024-01-15"},
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert (payload["name"], payload["initial_equity"], payload["timeframe"]) == (
        "Alpha v2",
        2500.0,
        "c4h",
    )
    assert payload["date_range"] == {"from": "2024-01-15", "to": "2024-01-31"}
    stored = repository.find_by_id(strategy_id="s-1")
    assert stored is not None
    assert stored.updated_at > stored.created_at
    assert stored.status == "draft"


def test_put_strategy_rejects_invalid_and_unknown_fields(tmp_path: Path) -> None:
    client, _ = _seeded_client(tmp_path)

    invalid = client.put(
        "/strategies/s-1",
        params={"user_id": "user-1"},
        json={"initial_equity": 0, "date_range": {"from": "2024-02-15"}},
    )
    unknown = client.put(
        "/strategies/s-1",
        params={"user_id": "user-1"},
        json={"status": "completed"},
    )

    assert invalid.status_code == 422
    assert unknown.status_code == 422


def test_delete_strategy_removes_owned_record_only(tmp_path: Path) -> None:
    client, repository = _seeded_client(tmp_path)

    foreign = client.delete("/strategies/s-3", params={"user_id": "user-1"})
    deleted = client.delete("/strategies/s-1", params={"user_id": "user-1"})
    again = client.delete("/strategies/s-1", params={"user_id": "user-1"})

    assert foreign.status_code == 403
    assert deleted.status_code == 204
    assert deleted.content == b""
    assert again.status_code == 404
    assert repository.find_by_id(strategy_id="s-1") is None
    assert repository.find_by_id(strategy_id="s-3") is not None
