"""Asyncio client for the TeamSpeak ClientQuery text protocol."""

from ts_clientquery.connection import TeamspeakConnection as TeamspeakConnection
from ts_clientquery.errors import ErrorKind as ErrorKind
from ts_clientquery.errors import QueryError as QueryError
from ts_clientquery.types import FromQueryString as FromQueryString
from ts_clientquery.types import NotifyTextMessage as NotifyTextMessage
from ts_clientquery.types import QueryModel as QueryModel
from ts_clientquery.types import QueryStatus as QueryStatus
from ts_clientquery.types import SchandlerId as SchandlerId
from ts_clientquery.types import WhoAmI as WhoAmI
