"""Show the current server tab."""

import typer

from ts_clientquery.app_context import use_context
from ts_clientquery.session import run_session


def tab(ctx: typer.Context) -> None:
    """Show the server connection handler id of the active tab."""
    app = use_context(ctx)
    result = run_session(app, lambda conn: conn.get_current_server_tab())
    app.out.print_server_tab(result.schandler_id)
