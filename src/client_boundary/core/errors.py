from pathlib import Path


class ClientBoundaryError(Exception):
    """Base class for errors raised by client-boundary."""


class ConfigDiscoveryError(ClientBoundaryError):
    def __init__(self, start_dir: Path, file_name: str) -> None:
        super().__init__(f"Could not find a valid {file_name} in {start_dir} or any parent directory.")
        self.start_dir = start_dir
        self.file_name = file_name


class ConfigParseError(ClientBoundaryError):
    def __init__(self, config_path: Path, reason: str) -> None:
        super().__init__(f"Error reading {config_path}: {reason}")
        self.config_path = config_path
        self.reason = reason


class SourceParseError(ClientBoundaryError):
    """A source file with syntax errors cannot be rewritten safely."""

    def __init__(self, path: Path, line: int, column: int) -> None:
        super().__init__(f"Syntax error in {path} at {line + 1}:{column + 1}")
        self.path = path
        self.line = line
        self.column = column


class UnsupportedLanguageError(ClientBoundaryError, ValueError):
    pass
