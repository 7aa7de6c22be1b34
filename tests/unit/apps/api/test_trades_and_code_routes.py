from __future__ import annotations

import json
from pathlib import Path

from fastapi.testclient import TestClient

from apps.api.main.app import create_app

_LEDGER = "\n".join(
    [
        "1,BTCUSDT,2024-01-02 10:00,42000,41000,43000,2024-01-02 12:00,100,0.5,0.1",
        "2,ETHUSDT,2024-01-03 10:00,2200,2100,2300,2024-01-03 12:00,250,1.2,-2",
        "3,BTCUSDT,2024-01-04 10:00,43000,42000,42500,2024-01-04 12:00,-20,-0.1,0.1",
        "4,ETHUSDT,2024-01-05 10:00,2300,2200,2250,2024-01-05 12:00,nan,-0.3,1",
    ]
)


class _EngineConnection:
    """
    Fake engine answering submit frames with `processing` and result probes with the ledger.
    """

    def __init__(self, engine: _Engine) -> None:
        self._engine = engine
        self._pending: list[str] = []

    async def send(self, payload: str) -> None:
        frame = json.loads(payload)
        self._engine.sent.append(frame)
        if frame["action"] == "test":
            self._pending.append('{"status":"processing"}')
        else:
            self._pending.extend(self._engine.result_frames)

    async def recv(self) -> str:
        return self._pending.pop(0)

    async def close(self) -> None:
        return None


class _Engine:
    def __init__(self, result_frames: list[str]) -> None:
        self.result_frames = result_frames
        self.sent: list[dict] = []

    async def open(self) -> _EngineConnection:
        return _EngineConnection(self)


def _client(tmp_path: Path, engine: _Engine) -> TestClient:
    config_path = tmp_path / "backtest_engine.yaml"
    config_path.write_text(
        "version: 1\n"
        "backtest_engine:\n"
        "  url: ws://engine.test:8080\n"
        "  timeouts: {connect_timeout_s: 0.5, status_timeout_s: 0.5, "
        "settle_delay_s: 0.05, result_timeout_s: 0.5}\n"
        f"  artifacts: {{root_dir: '{tmp_path.as_posix()}'}}\n",
        encoding="utf-8",
    )
    app = create_app(
        environ={"STRATLAB_ENV": "test", "STRATLAB_BACKTEST_ENGINE_CONFIG": str(config_path)},
        engine_connector=engine,
    )
    return TestClient(app, raise_server_exceptions=False)


def _submit(client: TestClient) -> str:
    response = client.post(
        "/backtest",
        json={
            "kind": "create",
            "name": "Pairs",
            "user_id": "user-1",
            "initial_equity": 10000,
            "timeframe": "c1m",
            "date_range": {"from": "2024-01-01", "to": "2024-01-07"},
            "code": "// pairs\n",
        },
    )
    assert response.status_code == 200
    return response.json()["strategy_id"]


def test_post_trades_groups_ledger_and_completes_record(tmp_path: Path) -> None:
    """
    Verify trades route fetches ledger, summarizes it, and marks running record completed.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Summaries are ordered by total PnL descending; NaN values render as `null`.
    Raises:
        AssertionError: If grouping, summary, or record transition differs from contract.
    Side Effects:
        Writes config and artifact files under `tmp_path`.
    """
    engine = _Engine(['{"status":"completed"}', json.dumps({"tradelog": _LEDGER})])
    client = _client(tmp_path, engine)
    strategy_id = _submit(client)

    response = client.post("/trades", json={"strategy_id": strategy_id, "user_id": "user-1"})

    assert response.status_code == 200
    payload = response.json()
    assert list(payload["grouped_trades"]) == ["BTCUSDT", "ETHUSDT"]
    assert [trade["id"] for trade in payload["grouped_trades"]["BTCUSDT"]] == [1, 3]
    assert payload["grouped_trades"]["ETHUSDT"][1]["pnl_amount"] is None
    assert [item["symbol"] for item in payload["summary"]] == ["BTCUSDT", "ETHUSDT"]
    assert payload["summary"][0] == {
        "symbol": "BTCUSDT",
        "total_trades": 2,
        "total_pnl": 80.0,
        "avg_pnl": 40.0,
        "total_abs_quantity": 0.2,
    }
    assert engine.sent[-1] == {"id": strategy_id, "action": "result", "user": "user-1", "password": ""}
    record = client.get(f"/strategies/{strategy_id}", params={"user_id": "user-1"}).json()
    assert record["status"] == "completed"


def test_post_trades_maps_engine_rejection_to_502(tmp_path: Path) -> None:
    engine = _Engine(['{"status":"failed","error":"job crashed"}'])
    client = _client(tmp_path, engine)
    strategy_id = _submit(client)

    response = client.post("/trades", json={"strategy_id": strategy_id, "user_id": "user-1"})

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "engine_unavailable"
    assert error["details"]["reason"] == "failed: job crashed"


def test_post_trades_requires_ownership(tmp_path: Path) -> None:
    client = _client(tmp_path, _Engine([]))
    strategy_id = _submit(client)

    response = client.post("/trades", json={"strategy_id": strategy_id, "user_id": "user-2"})

    assert response.status_code == 403


def test_get_code_returns_persisted_source_with_record(tmp_path: Path) -> None:
    client = _client(tmp_path, _Engine([]))
    strategy_id = _submit(client)

    response = client.get("/code", params={"strategy_id": strategy_id, "user_id": "user-1"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["code"] == "// pairs\n"
    assert payload["message"] is None
    assert payload["strategy"]["strategy_id"] == strategy_id
    assert payload["strategy"]["status"] == "running"


def test_get_code_without_artifact_returns_empty_code(tmp_path: Path) -> None:
    client = _client(tmp_path, _Engine([]))
    strategy_id = _submit(client)
    (tmp_path / "code" / "user-1" / f"{strategy_id}.h").unlink()

    response = client.get("/code", params={"strategy_id": strategy_id, "user_id": "user-1"})
    missing_params = client.get("/code")

    assert response.status_code == 200
    assert response.json()["code"] == ""
    assert response.json()["message"] == "No code file found for this strategy"
    assert missing_params.status_code == 422
