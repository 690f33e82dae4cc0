from typing import Protocol

from client_boundary.core.ast import SourceModule
from client_boundary.core.ports.checker import TypeChecker
from client_boundary.models import Diagnostic


class Program(Protocol):
    def get_source_file(self, file_name: str) -> SourceModule | None: ...

    def get_type_checker(self) -> TypeChecker | None: ...


class LanguageService(Protocol):
    def get_program(self) -> Program | None: ...

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]: ...
