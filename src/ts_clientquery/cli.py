"""CLI entry point for ts-clientquery."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from ts_clientquery.app_context import AppContext
from ts_clientquery.commands.listen import listen
from ts_clientquery.commands.ping import ping
from ts_clientquery.commands.pm import pm
from ts_clientquery.commands.say import say
from ts_clientquery.commands.tab import tab
from ts_clientquery.commands.whoami import whoami
from ts_clientquery.config import Config
from ts_clientquery.log import setup_logging
from ts_clientquery.output import Output

app = TyperPlus(package_name="ts-clientquery")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    host: Annotated[str | None, typer.Option("--host", help="ClientQuery host (overrides config.toml).")] = None,
    port: Annotated[int | None, typer.Option("--port", help="ClientQuery port (overrides config.toml).")] = None,
) -> None:
    """Talk to a running TeamSpeak client over ClientQuery."""
    cfg = Config.build(data_dir, host=host, port=port)
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path)
    ctx.obj = AppContext(out=Output(json_mode=json_output), cfg=cfg)


# Session
app.command(aliases=["p"])(ping)
app.command()(whoami)
app.command()(tab)

# Messages
app.command()(pm)
app.command()(say)
app.command()(listen)
