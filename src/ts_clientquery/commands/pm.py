"""Send a private message."""

import typer

from ts_clientquery.app_context import use_context
from ts_clientquery.session import run_session


def pm(ctx: typer.Context, server_id: int, client_id: int, text: str) -> None:
    """Send a private text message to a client."""
    app = use_context(ctx)
    run_session(app, lambda conn: conn.send_private_message(server_id, client_id, text))
    app.out.print_message_sent(f"client {client_id}")
