"""Connection lifecycle for CLI commands: connect, authenticate, run, close."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from ts_clientquery.app_context import AppContext
from ts_clientquery.config import Config
from ts_clientquery.connection import TeamspeakConnection
from ts_clientquery.errors import QueryError

T = TypeVar("T")


@asynccontextmanager
async def open_session(cfg: Config) -> AsyncIterator[TeamspeakConnection]:
    """Connect to the configured service and log in when an API key is set.

    Raises:
        OSError: Connection failed.
        QueryError: Authentication failed.

    """
    conn = await TeamspeakConnection.connect(cfg.host, cfg.port, buffer_size=cfg.buffer_size, read_timeout=cfg.read_timeout)
    async with conn:
        if cfg.api_key:
            await conn.login(cfg.api_key)
        yield conn


def run_session(app: AppContext, action: Callable[[TeamspeakConnection], Awaitable[T]]) -> T:
    """Run action against a fresh session, reporting failures through the output layer."""

    async def _run() -> T:
        async with open_session(app.cfg) as conn:
            return await action(conn)

    try:
        return asyncio.run(_run())
    except QueryError as e:
        app.out.print_error_and_exit(e.kind.name.lower(), str(e))
    except OSError as e:
        app.out.print_error_and_exit("connection_failed", f"Cannot reach {app.cfg.host}:{app.cfg.port}: {e}")
