"""Stream incoming notifications."""

import typer

from ts_clientquery.app_context import AppContext, use_context
from ts_clientquery.connection import ECHO_EVENT, TeamspeakConnection
from ts_clientquery.session import run_session
from ts_clientquery.types import NotifyTextMessage


def listen(
    ctx: typer.Context,
    *,
    event: str = typer.Option(default=ECHO_EVENT, help="Notification to subscribe to"),
) -> None:
    """Print notifications as they arrive, until the server closes the connection.

    Text messages are printed decoded; any other event is printed as its raw record.
    """
    app = use_context(ctx)
    run_session(app, lambda conn: stream_events(app, conn, event))


async def stream_events(app: AppContext, conn: TeamspeakConnection, event: str) -> None:
    """Register for event and print every notification of it."""
    await conn.register_event(event)
    interval = app.cfg.keepalive_interval
    if event == ECHO_EVENT:
        async for message in conn.listen(event, NotifyTextMessage, keepalive_interval=interval):
            app.out.print_notification(message)
    else:
        async for record in conn.listen(event, str, keepalive_interval=interval):
            app.out.print_event(event, record)
