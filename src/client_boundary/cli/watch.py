import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from client_boundary.core.config import find_project_root
from client_boundary.session import BoundarySession
from client_boundary.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console(stderr=True, highlight=False)


async def handle_changes(session: BoundarySession, paths: set[Path]) -> None:
    for report in session.process_all(paths):
        if report.error:
            console.print(f"[yellow]Skipped[/yellow] {report.path}: {report.error}")
            continue
        if report.rewritten:
            console.print(f"[green]Transformed[/green] {report.path}")
        for diagnostic in report.diagnostics:
            console.print(diagnostic.format(relative_to=session.plugin.project_root), markup=False, soft_wrap=True)


def watch(
    directory: Annotated[Path | None, typer.Argument(help="Directory to watch (default: project root).")] = None,
) -> None:
    """Watch a project, regenerating boundaries and reporting diagnostics on change."""
    root = find_project_root()
    session = BoundarySession(project_root=root)
    target = directory or root

    async def _run() -> None:
        watcher = WatchfilesWatcher(target, lambda paths: handle_changes(session, paths))
        await watcher.start()
        console.print(f"[green]Watching[/green] {target}")
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    asyncio.run(_run())
