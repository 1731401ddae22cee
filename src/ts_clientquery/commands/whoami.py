"""Show own client and channel id."""

import typer

from ts_clientquery.app_context import use_context
from ts_clientquery.session import run_session


def whoami(ctx: typer.Context) -> None:
    """Show own client id and channel id on the current server tab."""
    app = use_context(ctx)
    who = run_session(app, lambda conn: conn.whoami())
    app.out.print_whoami(who)
