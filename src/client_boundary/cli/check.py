from pathlib import Path

import typer
from rich.console import Console

from client_boundary.analysis.language_service import ClientBoundaryLanguageService
from client_boundary.analysis.program import ProjectLanguageService, ProjectProgram
from client_boundary.core.config import collect_project_files, find_config_file, load_project_config
from client_boundary.core.errors import ClientBoundaryError

err_console = Console(stderr=True, highlight=False)


def check() -> None:
    """Check every project file for non-serializable props passed to client components."""
    cwd = Path.cwd()
    try:
        config = load_project_config(find_config_file(cwd))
    except ClientBoundaryError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    program = ProjectProgram(collect_project_files(config))
    service = ClientBoundaryLanguageService(ProjectLanguageService(program))

    found = 0
    for path in program.root_files:
        for diagnostic in service.get_semantic_diagnostics(str(path)):
            err_console.print(diagnostic.format(relative_to=cwd), markup=False, soft_wrap=True)
            found += 1

    if found:
        err_console.print(f"[red]Found {found} error(s).[/red]")
        raise typer.Exit(code=1)
