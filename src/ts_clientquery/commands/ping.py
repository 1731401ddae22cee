"""Check that the ClientQuery session is alive."""

import typer

from ts_clientquery.app_context import use_context
from ts_clientquery.session import run_session


def ping(ctx: typer.Context) -> None:
    """Check that the ClientQuery session answers (exit 1 if not)."""
    app = use_context(ctx)
    alive = run_session(app, lambda conn: conn.keep_alive())
    app.out.print_alive(alive=alive)
    if not alive:
        raise typer.Exit(code=1)
