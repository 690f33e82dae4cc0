import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from client_boundary.cli.check import check
from client_boundary.cli.serve import mcp
from client_boundary.cli.transform import transform
from client_boundary.cli.watch import watch
from client_boundary.core.config import get_log_level

app = typer.Typer(
    name="client-boundary",
    help="Split imports marked `use: 'client'` and check the props crossing them.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


app.command("check")(check)
app.command("transform")(transform)
app.command("watch")(watch)
app.command("mcp")(mcp)


def main() -> None:
    app()
