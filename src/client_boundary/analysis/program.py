import logging
from collections.abc import Iterable
from pathlib import Path

from client_boundary.analysis.syntactic_checker import SyntacticTypeChecker
from client_boundary.core.ast import SourceModule, parse_file, syntax_errors
from client_boundary.core.errors import UnsupportedLanguageError
from client_boundary.core.languages import is_project_source
from client_boundary.core.ports.checker import TypeChecker
from client_boundary.models import Diagnostic, DiagnosticCategory

logger = logging.getLogger(__name__)

SYNTAX_ERROR_CODE = 100000


class ProjectProgram:
    """The project's source files, parsed on demand and re-parsed when they change on disk."""

    def __init__(self, root_files: Iterable[Path] = (), type_checker: TypeChecker | None = None) -> None:
        self.root_files = [path.absolute() for path in root_files]
        self._type_checker = type_checker if type_checker is not None else SyntacticTypeChecker()
        self._modules: dict[Path, tuple[int, SourceModule]] = {}

    def get_type_checker(self) -> TypeChecker | None:
        return self._type_checker

    def get_source_file(self, file_name: str) -> SourceModule | None:
        path = Path(file_name).absolute()
        if not is_project_source(path):
            return None
        try:
            mtime = path.stat().st_mtime_ns
        except FileNotFoundError:
            self._modules.pop(path, None)
            return None

        cached = self._modules.get(path)
        if cached is not None and cached[0] == mtime:
            return cached[1]
        try:
            module = parse_file(path)
        except UnsupportedLanguageError:
            return None
        self._modules[path] = (mtime, module)
        return module

    def source_files(self) -> list[SourceModule]:
        modules = (self.get_source_file(str(path)) for path in self.root_files)
        return [module for module in modules if module is not None]


class ProjectLanguageService:
    """Base language service for projects checked in-process.

    It has no semantic checks of its own; syntax errors are reported through
    ``get_syntactic_diagnostics``.
    """

    def __init__(self, program: ProjectProgram) -> None:
        self._program = program

    def get_program(self) -> ProjectProgram:
        return self._program

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        return []

    def get_syntactic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        module = self._program.get_source_file(file_name)
        if module is None:
            return []
        diagnostics = []
        for node in syntax_errors(module):
            row, column = node.start_point
            diagnostics.append(
                Diagnostic(
                    file=str(module.path),
                    start=node.start_byte,
                    length=node.end_byte - node.start_byte,
                    line=row,
                    column=column,
                    category=DiagnosticCategory.ERROR,
                    code=SYNTAX_ERROR_CODE,
                    message_text=f"Missing '{node.type}'." if node.is_missing else "Unexpected syntax.",
                )
            )
        return diagnostics
