from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from apps.api.common import register_api_error_handlers
from stratlab.contexts.backtest.application.use_cases import backtest_busy, engine_unavailable
from stratlab.contexts.backtest.domain.errors import EngineTimeoutError
from stratlab.platform.errors import StratlabError


class _Payload(BaseModel):
    name: str
    size: int


def _client() -> TestClient:
    app = FastAPI()
    register_api_error_handlers(app=app)

    @app.get("/raise/{code}")
    def _raise(code: str) -> None:
        raise StratlabError(code=code, message=f"{code} happened", details={"b": 2, "a": [1]})

    @app.get("/busy")
    def _busy() -> None:
        raise backtest_busy(strategy_id="s-1")

    @app.get("/engine")
    def _engine() -> None:
        raise engine_unavailable(error=EngineTimeoutError("engine result timeout after 15s"))

    @app.get("/crash")
    def _crash() -> None:
        raise RuntimeError("boom")

    @app.post("/payload")
    def _payload(payload: _Payload) -> None:
        return None

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize(
    ("code", "status_code"),
    [
        ("validation_error", 422),
        ("not_found", 404),
        ("forbidden", 403),
        ("conflict", 409),
        ("backtest_submission_failed", 502),
        ("engine_unavailable", 502),
        ("unexpected_error", 500),
        ("something_new", 500),
    ],
)
def test_stratlab_error_codes_map_to_stable_http_statuses(code: str, status_code: int) -> None:
    response = _client().get(f"/raise/{code}")

    assert response.status_code == status_code
    assert response.json() == {
        "error": {"code": code, "message": f"{code} happened", "details": {"a": [1], "b": 2}}
    }


def test_busy_and_engine_errors_carry_context_details() -> None:
    client = _client()

    busy = client.get("/busy")
    engine = client.get("/engine")

    assert busy.status_code == 409
    assert busy.json()["error"]["details"] == {"strategy_id": "s-1"}
    assert engine.status_code == 502
    assert engine.json()["error"]["details"] == {"reason": "engine result timeout after 15s"}


def test_request_validation_errors_are_sorted_and_normalized() -> None:
    """
    Verify FastAPI request validation renders canonical `validation_error` payload.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Pydantic `missing` type is normalized to `required`.
    Raises:
        AssertionError: If payload shape or ordering differs from contract.
    Side Effects:
        None.
    """
    response = _client().post("/payload", json={"size": "large"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "validation_error"
    assert error["message"] == "Validation failed"
    assert [(item["path"], item["code"]) for item in error["details"]["errors"]] == [
        ("body.name", "required"),
        ("body.size", "int_parsing"),
    ]


def test_unhandled_exception_renders_unexpected_error(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        response = _client().get("/crash")

    assert response.status_code == 500
    assert response.json() == {
        "error": {
            "code": "unexpected_error",
            "message": "Unexpected server error",
            "details": {"reason": "RuntimeError"},
        }
    }
    assert "status=unhandled" in caplog.text
