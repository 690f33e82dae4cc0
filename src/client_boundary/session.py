import logging
from dataclasses import dataclass, field
from pathlib import Path

from client_boundary.analysis.language_service import ClientBoundaryLanguageService
from client_boundary.analysis.program import ProjectLanguageService, ProjectProgram
from client_boundary.core.errors import SourceParseError
from client_boundary.core.ports.store import VirtualModuleStore
from client_boundary.models import Diagnostic
from client_boundary.plugin import ClientBoundaryPlugin
from client_boundary.store import DiskModuleStore

logger = logging.getLogger(__name__)


@dataclass
class FileReport:
    path: Path
    rewritten: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None


class BoundarySession:
    """Transform plus analysis for a long-lived host (watch mode, MCP server)."""

    def __init__(
        self,
        project_root: Path | None = None,
        store: VirtualModuleStore | None = None,
        program: ProjectProgram | None = None,
    ) -> None:
        self.plugin = ClientBoundaryPlugin(store if store is not None else DiskModuleStore(), project_root)
        self.program = program if program is not None else ProjectProgram()
        self.language_service = ClientBoundaryLanguageService(ProjectLanguageService(self.program))

    def transform_file(self, path: Path) -> str:
        return self.plugin.transform(path, path.read_text(encoding="utf-8"))

    def check_file(self, path: Path) -> list[Diagnostic]:
        return self.language_service.get_semantic_diagnostics(str(path))

    def process(self, path: Path) -> FileReport:
        report = FileReport(path=path)
        if not self.plugin.should_transform(path):
            return report
        try:
            source = path.read_text(encoding="utf-8")
            report.rewritten = self.plugin.transform(path, source) != source
        except (SourceParseError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            report.error = str(exc)
            return report
        report.diagnostics = self.check_file(path)
        return report

    def process_all(self, paths: set[Path]) -> list[FileReport]:
        return [self.process(path) for path in sorted(paths)]
