"""Tests for the listen command's event streaming."""

import asyncio
import json
from pathlib import Path

import pytest

from ts_clientquery.app_context import AppContext
from ts_clientquery.commands.listen import stream_events
from ts_clientquery.config import Config
from ts_clientquery.connection import TeamspeakConnection
from ts_clientquery.output import Output

OK = b"error id=0 msg=ok\n\r"


class _Writer:
    """Minimal asyncio.StreamWriter stand-in."""

    def __init__(self) -> None:
        self.sent = bytearray()

    def write(self, data: bytes) -> None:
        self.sent.extend(data)

    async def drain(self) -> None:
        pass

    def is_closing(self) -> bool:
        return False


def _connection(events: bytes) -> tuple[TeamspeakConnection, _Writer]:
    """Connection that answers the register command, then delivers events and closes."""
    reader = asyncio.StreamReader()
    reader.feed_data(OK)

    def deliver() -> None:
        reader.feed_data(events)
        reader.feed_eof()

    asyncio.get_running_loop().call_later(0.05, deliver)
    writer = _Writer()
    return TeamspeakConnection(reader, writer, read_timeout=0.2), writer  # type: ignore[arg-type]


@pytest.fixture
def app(tmp_path: Path) -> AppContext:
    """JSON-mode application context."""
    return AppContext(out=Output(json_mode=True), cfg=Config(data_dir=tmp_path))


class TestStreamEvents:
    """stream_events() picks the row type by event."""

    @pytest.mark.asyncio
    async def test_text_messages_decoded(self, app: AppContext, capsys: pytest.CaptureFixture[str]):
        """Text messages are printed as decoded rows."""
        conn, writer = _connection(b"notifytextmessage targetmode=1 msg=hi invokerid=2 invokername=Jane\n\r")
        await stream_events(app, conn, "notifytextmessage")
        assert bytes(writer.sent) == b"clientnotifyregister schandlerid=0 event=notifytextmessage\n\r"
        out = json.loads(capsys.readouterr().out)
        assert out["data"]["msg"] == "hi"
        assert out["data"]["invokername"] == "Jane"

    @pytest.mark.asyncio
    async def test_other_events_printed_raw(self, app: AppContext, capsys: pytest.CaptureFixture[str]):
        """Events other than text messages are printed as raw records."""
        conn, _ = _connection(b"notifyclientmoved schandlerid=1 clid=3 ctid=4\n\r")
        await stream_events(app, conn, "notifyclientmoved")
        out = json.loads(capsys.readouterr().out)
        assert out == {"ok": True, "data": {"event": "notifyclientmoved", "record": "schandlerid=1 clid=3 ctid=4"}}
