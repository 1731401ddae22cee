"""Asyncio connection to a ClientQuery service: framing, round trips, and commands.

One connection serves one caller at a time: requests and responses are strictly
sequential, with no pipelining and no internal locking.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Self, TypeVar

from ts_clientquery.errors import QueryError
from ts_clientquery.framing import ResponseAccumulator
from ts_clientquery.querystring import TERMINATOR, build_command
from ts_clientquery.types import NotifyTextMessage, SchandlerId, WhoAmI
from ts_clientquery.wire import decode_notifications, decode_status, decode_status_with_result, split_events

T = TypeVar("T")

DEFAULT_BUFFER_SIZE = 512
DEFAULT_READ_TIMEOUT = 2.0
ECHO_EVENT = "notifytextmessage"

# sendtextmessage targetmode values
_TARGET_PRIVATE = 1
_TARGET_CHANNEL = 2

_logger = logging.getLogger(__name__)


class TeamspeakConnection:
    """Exclusive owner of one ClientQuery TCP stream."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> None:
        """Wrap an already-open stream pair.

        Args:
            reader: Stream the responses are read from.
            writer: Stream the commands are written to.
            buffer_size: Maximum bytes per read; a shorter read ends a response.
            read_timeout: Seconds a single read may wait before the response counts as absent.
            logger: Sink for wire traces and diagnostics (defaults to the module logger).

        """
        self._reader = reader
        self._writer = writer
        self._buffer_size = buffer_size
        self._read_timeout = read_timeout
        self._log = logger or _logger
        # Chunk picked up by wait_readable(), handed to the next read_data()
        self._pending = b""
        # Event lines that arrived interleaved with a command reply
        self._held_events: list[str] = []

    @classmethod
    async def connect(
        cls,
        host: str,
        port: int,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> Self:
        """Open a TCP connection and discard the server's welcome banner.

        Raises:
            OSError: The connection could not be established.

        """
        reader, writer = await asyncio.open_connection(host, port)
        conn = cls(reader, writer, buffer_size=buffer_size, read_timeout=read_timeout, logger=logger)
        await asyncio.sleep(0.01)
        try:
            banner = await conn.read_data()
        except OSError:
            writer.close()
            raise
        if banner is None:
            conn._log.warning("Read none data.")
        return conn

    async def close(self) -> None:
        """Close the stream. Any response still in flight is dropped."""
        self._writer.close()
        await self._writer.wait_closed()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        await self.close()

    # --- Framing ---

    async def wait_readable(self) -> bool:
        """Wait until data is available without consuming it. Return False at end of stream.

        Raises:
            OSError: Transport failure.

        """
        if not self._pending:
            self._pending = await self._reader.read(self._buffer_size)
        return bool(self._pending)

    async def read_data(self) -> str | None:
        """Read one complete response.

        Returns None when any single read attempt exceeds the read timeout; bytes already
        accumulated for the response are discarded in that case.

        Raises:
            OSError: Transport failure.

        """
        acc = ResponseAccumulator(self._buffer_size)
        while True:
            try:
                chunk = await self._read_chunk()
            except TimeoutError:
                self._log.debug("Read timed out after %.1fs (%d bytes discarded)", self._read_timeout, acc.bytes_received)
                return None
            if acc.feed(chunk):
                break
        self._log.debug("receive => %r", acc.text)
        return acc.text

    async def _read_chunk(self) -> bytes:
        if self._pending:
            chunk, self._pending = self._pending, b""
            return chunk
        return await asyncio.wait_for(self._reader.read(self._buffer_size), timeout=self._read_timeout)

    async def write_data(self, payload: str) -> None:
        """Send one terminated command payload in a single write.

        Raises:
            ValueError: Payload lacks the line terminator.
            QueryError: The transport accepted no bytes (code: LENGTH_MISMATCH).
            OSError: Transport failure.

        """
        if not payload.endswith(TERMINATOR):
            msg = f"Payload must end with {TERMINATOR!r}: {payload!r}"
            raise ValueError(msg)
        self._log.debug("send => %r", payload)
        if self._writer.is_closing():
            err = QueryError.length_mismatch(payload, 0)
            self._log.error(err.message)
            raise err
        self._writer.write(payload.encode())
        await self._writer.drain()

    async def write_and_read(self, payload: str) -> str:
        """Send payload and return the raw response.

        Raises:
            QueryError: No response within the read timeout (code: EMPTY_RESULT_RESPONSE),
                transport failure (code: IO_ERROR), or a failed write (code: LENGTH_MISMATCH).

        """
        try:
            await self.write_data(payload)
            data = await self.read_data()
        except OSError as e:
            raise QueryError.io_error(e) from e
        if data is None:
            raise QueryError.except_data_not_found()
        return data

    # --- Generic operations ---

    async def basic_operation(self, payload: str) -> None:
        """Run a command that returns nothing but a status line."""
        decode_status(await self.write_and_read(payload))

    async def query(self, payload: str, row_type: type[T] | None) -> list[T]:
        """Run a command that must return at least one data line.

        Raises:
            QueryError: Any round-trip or decode failure, or a response without data
                (code: EMPTY_RESULT_RESPONSE).

        """
        rows = decode_status_with_result(await self.write_and_read(payload), row_type)
        if rows is None:
            raise QueryError.except_data_not_found_payload(payload)
        return rows

    async def query_one(self, payload: str, row_type: type[T] | None) -> T:
        """Run a query and return its first row."""
        rows = await self.query(payload, row_type)
        return rows[0]

    async def listen(self, event: str, row_type: type[T] | None, *, keepalive_interval: float | None = None) -> AsyncIterator[T]:
        """Yield decoded ``event`` notifications until the server closes the stream.

        Lines for other events are skipped. The caller must have registered for the event.

        Args:
            event: Notification name, e.g. ``notifytextmessage``.
            row_type: Row type each notification line is decoded into.
            keepalive_interval: Seconds of silence after which keep_alive() is sent;
                the iteration ends when that check fails. None waits indefinitely.

        """
        partial = ""
        while True:
            if self._held_events:
                held, self._held_events = self._held_events, []
                for row in decode_notifications(TERMINATOR.join(held), event, row_type):
                    yield row
            try:
                readable = await asyncio.wait_for(self.wait_readable(), timeout=keepalive_interval)
            except TimeoutError:
                if not await self.keep_alive():
                    self._log.warning("Keep-alive check failed, stop listening.")
                    return
                continue
            if not readable:
                self._log.info("Stream closed by server.")
                return
            raw = await self.read_data()
            if raw is None:
                continue
            # A line split across reads is completed by the next read
            complete, _, partial = (partial + raw).rpartition(TERMINATOR)
            for row in decode_notifications(complete, event, row_type):
                yield row

    # --- Commands ---

    async def keep_alive(self) -> bool:
        """Check that the session still answers ``whoami`` with client and channel ids."""
        payload = f"whoami{TERMINATOR}"
        events, reply = split_events(await self.write_and_read(payload))
        self._held_events.extend(events)
        rows = decode_status_with_result(reply, str)
        if rows is None:
            raise QueryError.except_data_not_found_payload(payload)
        return "clid=" in rows[0] and "cid=" in rows[0]

    async def whoami(self) -> WhoAmI:
        return await self.query_one(f"whoami{TERMINATOR}", WhoAmI)

    async def login(self, api_key: str) -> None:
        await self.basic_operation(build_command("auth", apikey=api_key))

    async def register_event(self, event: str) -> None:
        await self.basic_operation(build_command("clientnotifyregister", schandlerid=0, event=event))

    async def get_current_server_tab(self) -> SchandlerId:
        return await self.query_one(f"currentschandlerid{TERMINATOR}", SchandlerId)

    async def send_private_message(self, server_id: int, client_id: int, text: str) -> None:
        await self._send_text_message(_TARGET_PRIVATE, server_id, client_id, text)

    async def send_channel_message(self, server_id: int, text: str) -> None:
        await self._send_text_message(_TARGET_CHANNEL, server_id, 0, text)

    async def _send_text_message(self, mode: int, server_id: int, client_id: int, text: str) -> None:
        """Send a text message and verify the server's echo when one comes back.

        Raises:
            QueryError: Echo malformed or different from text (code: SEND_MESSAGE_ERROR),
                echo not decodable (code: DECODE_ERROR), or any status failure.

        """
        payload = build_command("sendtextmessage", schandlerid=server_id, targetmode=mode, target=client_id, msg=text)
        data = await self.write_and_read(payload)
        data, _, _ = data.partition(TERMINATOR)
        if not data.startswith(ECHO_EVENT):
            decode_status(data)
            return
        _, sep, record = data.partition(f"{ECHO_EVENT} ")
        if not sep:
            raise QueryError.send_message_error(data)
        try:
            echo = NotifyTextMessage.from_query(record)
        except QueryError as e:
            raise QueryError.decode_error(record) from e
        if echo.msg != text:
            raise QueryError.send_message_error("None (No equal)")
