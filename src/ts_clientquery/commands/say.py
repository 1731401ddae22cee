"""Send a channel message."""

import typer

from ts_clientquery.app_context import use_context
from ts_clientquery.session import run_session


def say(ctx: typer.Context, server_id: int, text: str) -> None:
    """Send a text message to the current channel."""
    app = use_context(ctx)
    run_session(app, lambda conn: conn.send_channel_message(server_id, text))
    app.out.print_message_sent("channel")
