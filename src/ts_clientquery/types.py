"""Row codec: typed decoding of single query-string records.

A row type is anything with a ``from_query(line)`` classmethod. Two trivial rows are
handled by decode_row() directly: ``None`` (no data, always succeeds) and ``str``
(the line verbatim, no parsing).
"""

from typing import Any, Protocol, Self, TypeVar, cast, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ts_clientquery.errors import QueryError
from ts_clientquery.querystring import encode_line, parse_line

T = TypeVar("T")

STATUS_MARKER = "error "


@runtime_checkable
class FromQueryString(Protocol):
    """Capability: constructible from one ``key=value`` encoded line."""

    @classmethod
    def from_query(cls, data: str) -> Self: ...


def decode_row(row_type: type[T] | None, line: str) -> T:
    """Decode one record into row_type.

    Raises:
        QueryError: The record does not fit row_type (code: DESERIALIZE_ERROR).

    """
    if row_type is None or row_type is type(None):
        return cast(T, None)
    if row_type is str:
        return cast(T, line)
    if not isinstance(row_type, type) or not issubclass(row_type, FromQueryString):
        msg = f"{row_type!r} is not decodable from a query string"
        raise TypeError(msg)
    return cast(T, row_type.from_query(line))


class QueryModel(BaseModel):
    """Base for structured rows. Wire names are field aliases; unknown keys are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def from_query(cls, data: str) -> Self:
        """Parse and validate one record.

        Raises:
            QueryError: Missing or mistyped fields (code: DESERIALIZE_ERROR).

        """
        try:
            return cls.model_validate(parse_line(data))
        except ValidationError as e:
            raise QueryError.deserialize_error(e) from e

    def to_query(self) -> str:
        """Encode this row back into one record using wire names."""
        fields: dict[str, Any] = self.model_dump(by_alias=True)
        return encode_line(fields)


class QueryStatus(QueryModel):
    """Terminal status line of a response: ``error id=<int> msg=<text>``."""

    # Negative codes are reserved for local sentinels
    id: int = Field(ge=0)
    msg: str

    @classmethod
    def ok(cls) -> Self:
        return cls(id=0, msg="ok")

    @classmethod
    def from_line(cls, line: str) -> Self:
        """Parse a full status line, marker included.

        Raises:
            QueryError: Marker missing (split error) or remainder invalid (parse error).

        """
        _, sep, rest = line.partition(STATUS_MARKER)
        if not sep:
            raise QueryError.split_error(line)
        try:
            return cls.model_validate(parse_line(rest))
        except ValidationError as e:
            raise QueryError.parse_error(e, rest) from e

    @property
    def is_ok(self) -> bool:
        return self.id == 0

    def into_error(self) -> QueryError:
        return QueryError.from_status(self.id, self.msg)

    def into_result(self, value: T) -> T:
        """Return value on success, otherwise raise the server-reported error.

        Raises:
            QueryError: Non-zero status id (code: the id itself).

        """
        if self.id == 0:
            return value
        raise self.into_error()


class SchandlerId(QueryModel):
    """Server connection handler id of a client tab."""

    schandler_id: int = Field(alias="schandlerid")


class WhoAmI(QueryModel):
    """Own client and channel id on the current tab."""

    client_id: int = Field(alias="clid")
    channel_id: int = Field(alias="cid")


class NotifyTextMessage(QueryModel):
    """Text message event, also echoed back after sending a message."""

    target_mode: int = Field(default=0, alias="targetmode")
    msg: str
    invoker_id: int = Field(default=0, alias="invokerid")
    invoker_name: str = Field(default="", alias="invokername")
    invoker_uid: str = Field(default="", alias="invokeruid")
