"""Tests for the row codec and the status model."""

import pytest

from ts_clientquery.errors import ErrorKind, QueryError
from ts_clientquery.types import FromQueryString, NotifyTextMessage, QueryStatus, SchandlerId, WhoAmI, decode_row


class TestDecodeRow:
    """decode_row() dispatch over row types."""

    def test_unit_row(self):
        """None decodes any record to None."""
        assert decode_row(None, "anything=1 at all") is None
        assert decode_row(type(None), "") is None

    def test_raw_row(self):
        """str keeps the record verbatim, escapes included."""
        assert decode_row(str, r"msg=a\sb") == r"msg=a\sb"

    def test_structured_row(self):
        """Model rows are parsed through from_query()."""
        assert decode_row(SchandlerId, "schandlerid=3").schandler_id == 3

    def test_not_decodable(self):
        """Types without from_query() are rejected."""
        with pytest.raises(TypeError):
            decode_row(int, "1")

    def test_models_satisfy_protocol(self):
        """Structured rows expose the FromQueryString capability."""
        assert issubclass(NotifyTextMessage, FromQueryString)


class TestQueryModel:
    """Structured row decoding rules."""

    def test_defaults_for_missing_fields(self):
        """Optional fields fall back to declared defaults."""
        row = NotifyTextMessage.from_query("msg=hi")
        assert row.msg == "hi"
        assert row.target_mode == 0
        assert row.invoker_id == 0
        assert row.invoker_name == ""

    def test_unknown_fields_ignored(self):
        """Keys without a field are dropped."""
        row = WhoAmI.from_query("clid=5 cid=7 extra=1")
        assert (row.client_id, row.channel_id) == (5, 7)

    def test_values_unescaped(self):
        """Escaped values reach the model unescaped."""
        row = NotifyTextMessage.from_query(r"targetmode=1 msg=hello\sworld invokername=Jane\pDoe")
        assert row.msg == "hello world"
        assert row.invoker_name == "Jane|Doe"

    def test_missing_required_field(self):
        """A missing required field is a DESERIALIZE_ERROR."""
        with pytest.raises(QueryError) as exc_info:
            NotifyTextMessage.from_query("targetmode=1")
        assert exc_info.value.kind is ErrorKind.DESERIALIZE_ERROR
        assert exc_info.value.message.startswith("DeserializeError")

    def test_wrong_type(self):
        """A non-numeric id is a DESERIALIZE_ERROR."""
        with pytest.raises(QueryError) as exc_info:
            SchandlerId.from_query("schandlerid=abc")
        assert exc_info.value.kind is ErrorKind.DESERIALIZE_ERROR

    def test_to_query_round_trip(self):
        """Encoding a row and decoding it back yields an equal row."""
        row = NotifyTextMessage(targetmode=2, msg="a b|c/d", invokerid=9, invokername="Jane Doe", invokeruid="abc=")
        assert NotifyTextMessage.from_query(row.to_query()) == row

    def test_to_query_uses_wire_names(self):
        """Encoded records use aliases, not Python field names."""
        assert SchandlerId(schandlerid=1).to_query() == "schandlerid=1"


class TestQueryStatus:
    """Status line parsing and conversion."""

    def test_ok_line(self):
        """A success line parses to id 0."""
        status = QueryStatus.from_line("error id=0 msg=ok")
        assert status == QueryStatus.ok()
        assert status.is_ok

    def test_error_line_unescapes_message(self):
        """The message is unescaped."""
        status = QueryStatus.from_line(r"error id=1538 msg=invalid\sparameter")
        assert status.id == 1538
        assert status.msg == "invalid parameter"

    def test_missing_marker_is_split_error(self):
        """A line without the marker fails at the split stage."""
        with pytest.raises(QueryError) as exc_info:
            QueryStatus.from_line("id=0 msg=ok")
        assert exc_info.value.kind is ErrorKind.DESERIALIZE_ERROR
        assert exc_info.value.message.startswith("SplitError")

    def test_bad_remainder_is_parse_error(self):
        """A marker followed by an invalid record fails at the parse stage."""
        with pytest.raises(QueryError) as exc_info:
            QueryStatus.from_line("error id=x msg=ok")
        assert exc_info.value.message.startswith("ParseError")

    @pytest.mark.parametrize("line", ["error id=-9 msg=weird", "error id=-1 msg=ok"])
    def test_negative_id_is_parse_error(self, line: str):
        """Negative ids belong to local sentinels and are rejected from the wire."""
        with pytest.raises(QueryError) as exc_info:
            QueryStatus.from_line(line)
        assert exc_info.value.kind is ErrorKind.DESERIALIZE_ERROR
        assert exc_info.value.message.startswith("ParseError")

    def test_missing_fields_is_parse_error(self):
        """id and msg are both required."""
        with pytest.raises(QueryError) as exc_info:
            QueryStatus.from_line("error msg=ok")
        assert exc_info.value.message.startswith("ParseError")

    def test_into_result_success(self):
        """id 0 passes the value through."""
        assert QueryStatus.ok().into_result("payload") == "payload"

    def test_into_result_failure(self):
        """Non-zero id raises the server error verbatim."""
        with pytest.raises(QueryError) as exc_info:
            QueryStatus(id=256, msg="command not found").into_result("payload")
        assert exc_info.value.code == 256
        assert exc_info.value.message == "command not found"
        assert exc_info.value.kind is ErrorKind.TEAMSPEAK_ERROR
