"""Tests for CLI session handling and error reporting."""

import json
import socket
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
import typer

from ts_clientquery import session
from ts_clientquery.app_context import AppContext
from ts_clientquery.config import Config
from ts_clientquery.errors import QueryError
from ts_clientquery.output import Output


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port: int = s.getsockname()[1]
    return port


@pytest.fixture
def app(tmp_path: Path) -> AppContext:
    """JSON-mode application context pointing at a closed local port."""
    return AppContext(out=Output(json_mode=True), cfg=Config(data_dir=tmp_path, port=_closed_port()))


class TestRunSession:
    """run_session() result and error mapping."""

    def test_returns_action_result(self, app: AppContext, monkeypatch: pytest.MonkeyPatch):
        """The action's value is returned."""

        @asynccontextmanager
        async def fake_session(cfg: Config) -> AsyncIterator[object]:
            yield object()

        async def action(conn: object) -> int:
            return 42

        monkeypatch.setattr(session, "open_session", fake_session)
        assert session.run_session(app, action) == 42

    def test_query_error_reported(self, app: AppContext, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
        """QueryError exits 1 with the error kind as code."""

        @asynccontextmanager
        async def fake_session(cfg: Config) -> AsyncIterator[object]:
            yield object()

        async def action(conn: object) -> None:
            raise QueryError.from_status(1538, "invalid parameter")

        monkeypatch.setattr(session, "open_session", fake_session)
        with pytest.raises(typer.Exit) as exc_info:
            session.run_session(app, action)
        assert exc_info.value.exit_code == 1
        out = json.loads(capsys.readouterr().out)
        assert out == {"ok": False, "error": "teamspeak_error", "message": "invalid parameter(1538)"}

    def test_connection_refused_reported(self, app: AppContext, capsys: pytest.CaptureFixture[str]):
        """A refused connection exits 1 as connection_failed."""

        async def action(conn: object) -> None:
            pytest.fail("action must not run without a connection")

        with pytest.raises(typer.Exit):
            session.run_session(app, action)
        out = json.loads(capsys.readouterr().out)
        assert out["error"] == "connection_failed"
