"""Wire decoder: separates the terminal status line from data lines.

Every response carries exactly one status line (``error id=<int> msg=<text>``); zero or
more preceding lines are data, each a ``|``-separated sequence of records.
"""

from typing import TypeVar

from ts_clientquery.errors import QueryError
from ts_clientquery.querystring import TERMINATOR
from ts_clientquery.types import STATUS_MARKER, QueryStatus, decode_row

T = TypeVar("T")

ROW_DELIMITER = "|"
EVENT_PREFIX = "notify"


def split_lines(raw: str) -> list[str]:
    """Split a response on the line terminator, dropping surrounding whitespace and blank lines."""
    return [line for line in (part.strip() for part in raw.split(TERMINATOR)) if line]


def decode_status(raw: str) -> str:
    """Validate the response status and return the response unchanged.

    Raises:
        QueryError: No status line (code: EMPTY_RESPONSE), malformed status line
            (code: DESERIALIZE_ERROR), or a server-reported failure (code: the status id).

    """
    for line in split_lines(raw):
        if line.startswith(STATUS_MARKER):
            return QueryStatus.from_line(line).into_result(raw)
    raise QueryError.empty_response()


def decode_status_with_result(raw: str, row_type: type[T] | None) -> list[T] | None:
    """Validate the status, then decode the first data line into rows.

    Returns None when the command succeeded without a data line.

    Raises:
        QueryError: Any failure of decode_status(), or any record failing to decode.
            A single bad record fails the whole batch.

    """
    content = decode_status(raw)
    for line in split_lines(content):
        if not line.startswith(STATUS_MARKER):
            return [decode_row(row_type, record) for record in line.split(ROW_DELIMITER)]
    return None


def decode_notifications(raw: str, event: str, row_type: type[T] | None) -> list[T]:
    """Decode every ``<event> key=value ...`` line of raw into a row, in order."""
    prefix = f"{event} "
    return [decode_row(row_type, line.removeprefix(prefix)) for line in split_lines(raw) if line.startswith(prefix)]


def split_events(raw: str) -> tuple[list[str], str]:
    """Separate ``notify*`` event lines from the reply to a command.

    Events can interleave with a reply when notifications are registered.
    Returns the event lines and the remaining response text.
    """
    events: list[str] = []
    rest: list[str] = []
    for line in split_lines(raw):
        (events if line.startswith(EVENT_PREFIX) else rest).append(line)
    return events, "".join(line + TERMINATOR for line in rest)
