"""Error taxonomy for ClientQuery operations.

Local failures use negative sentinel codes; protocol failures carry the server's
non-zero status id verbatim.
"""

from enum import IntEnum
from typing import Self


class ErrorKind(IntEnum):
    """Classification of a QueryError by its code."""

    OK = 0
    EMPTY_RESPONSE = -1
    SEND_MESSAGE_ERROR = -2
    DECODE_ERROR = -3
    LENGTH_MISMATCH = -4
    EMPTY_RESULT_RESPONSE = -5
    IO_ERROR = -6
    DESERIALIZE_ERROR = -7
    TEAMSPEAK_ERROR = 1


class QueryError(Exception):
    """Failure of a ClientQuery operation, local or reported by the server."""

    def __init__(self, code: int, message: str) -> None:
        """Initialize with a numeric code and a human-readable message.

        Args:
            code: Negative local sentinel, or the server's status id (>= 1).
            message: Human-readable error description.

        """
        super().__init__(message)
        self.code = int(code)
        self.message = message

    def __str__(self) -> str:
        return f"{self.message}({self.code})"

    @property
    def kind(self) -> ErrorKind:
        """Map the code to its ErrorKind. Every server-reported code is TEAMSPEAK_ERROR."""
        if self.code >= 1:
            return ErrorKind.TEAMSPEAK_ERROR
        return ErrorKind(self.code)

    # --- Local sentinels ---

    @classmethod
    def empty_response(cls) -> Self:
        return cls(ErrorKind.EMPTY_RESPONSE, "Expect result but none found.")

    @classmethod
    def send_message_error(cls, data: str) -> Self:
        return cls(ErrorKind.SEND_MESSAGE_ERROR, f"Unable to send message, raw data => {data}")

    @classmethod
    def decode_error(cls, data: str) -> Self:
        return cls(ErrorKind.DECODE_ERROR, f"Decode result error: {data}")

    @classmethod
    def length_mismatch(cls, payload: str, size: int) -> Self:
        expected = len(payload.encode())
        return cls(ErrorKind.LENGTH_MISMATCH, f"Error payload size mismatch! expect {expected} but {size} found. payload: {payload!r}")

    @classmethod
    def except_data_not_found(cls) -> Self:
        return cls(ErrorKind.EMPTY_RESULT_RESPONSE, "Except data but not found")

    @classmethod
    def except_data_not_found_payload(cls, payload: str) -> Self:
        return cls(ErrorKind.EMPTY_RESULT_RESPONSE, f"Except data but not found, payload => {payload!r}")

    @classmethod
    def io_error(cls, exc: OSError) -> Self:
        return cls(ErrorKind.IO_ERROR, f"IOError: {exc!r}")

    @classmethod
    def parse_error(cls, exc: Exception, line: str) -> Self:
        return cls(ErrorKind.DESERIALIZE_ERROR, f"ParseError {line!r} {exc}")

    @classmethod
    def split_error(cls, line: str) -> Self:
        return cls(ErrorKind.DESERIALIZE_ERROR, f"SplitError: {line!r}")

    @classmethod
    def deserialize_error(cls, exc: Exception) -> Self:
        return cls(ErrorKind.DESERIALIZE_ERROR, f"DeserializeError: {exc}")

    # --- Protocol ---

    @classmethod
    def from_status(cls, code: int, message: str) -> Self:
        """Build a protocol error from a non-zero status line."""
        return cls(code, message)
