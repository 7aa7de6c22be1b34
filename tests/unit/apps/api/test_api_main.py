from __future__ import annotations

import pytest

from apps.api.main import main as api_main


def test_main_runs_uvicorn_with_parsed_bind_address(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict]] = []
    monkeypatch.setattr(
        api_main.uvicorn,
        "run",
        lambda target, **kwargs: calls.append((target, kwargs)),
    )

    exit_code = api_main.main(["--host", "127.0.0.1", "--port", "9001", "--log-level", "debug"])

    assert exit_code == 0
    assert calls == [("apps.api.main.app:app", {"host": "127.0.0.1", "port": 9001})]
