from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

CLIENT_DIRECTIVE = "use client"


class DiagnosticCategory(StrEnum):
    ERROR = "error"


class NonSerializableReason(StrEnum):
    NOT_AN_ALLOWED_CONTAINER = "not-an-allowed-container"
    OPAQUE_OBJECT = "opaque-object"
    NON_CONFORMING_FUNCTION = "non-conforming-function"
    UNREGISTERED_SYMBOL = "unregistered-symbol"
    UNSUPPORTED_TYPE = "unsupported-type"


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    start: int
    length: int
    line: int
    column: int
    category: DiagnosticCategory = DiagnosticCategory.ERROR
    code: int
    message_text: str
    reason: NonSerializableReason | None = None

    def format(self, relative_to: Path | None = None) -> str:
        path = Path(self.file)
        if relative_to is not None and path.is_relative_to(relative_to):
            path = path.relative_to(relative_to)
        return f"{path.as_posix()}:{self.line + 1}:{self.column + 1} - {self.category} CB{self.code}: {self.message_text}"


class BoundaryModule(BaseModel):
    """A synthetic re-export module placed on the client side of an import boundary."""

    model_config = ConfigDict(frozen=True)

    boundary_id: str
    path: Path
    export_statement: str
    directive: str = CLIENT_DIRECTIVE

    @property
    def content(self) -> str:
        return f"'{self.directive}';\n{self.export_statement}"


class ProjectConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    config_path: Path
    root_dir: Path
    files: list[str] = Field(default_factory=list)
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
