from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from client_boundary.core.config import find_project_root
from client_boundary.core.errors import ClientBoundaryError
from client_boundary.plugin import ClientBoundaryPlugin
from client_boundary.store import DiskModuleStore

err_console = Console(stderr=True)


def transform(
    path: Annotated[Path, typer.Argument(help="Source file to transform.", exists=True, dir_okay=False)],
) -> None:
    """Rewrite client imports of a file, writing boundary modules under the project root."""
    plugin = ClientBoundaryPlugin(DiskModuleStore(), project_root=find_project_root(path.parent))
    try:
        output = plugin.transform(path, path.read_text(encoding="utf-8"))
    except (ClientBoundaryError, UnicodeDecodeError) as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    for boundary in plugin.registry.paths():
        err_console.print(f"[green]Generated[/green] {boundary}")
    typer.echo(output, nl=False)
