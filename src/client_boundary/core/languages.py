from pathlib import Path

from client_boundary.core.errors import UnsupportedLanguageError

_LANGUAGE_ALIASES = {
    "javascript": "javascript",
    "js": "javascript",
    "jsx": "tsx",
    "ts": "typescript",
    "tsx": "tsx",
    "typescript": "typescript",
}

# JSX in .js/.jsx files is parsed with the tsx grammar so type-free JSX and
# annotated JSX share one node vocabulary.
_EXTENSION_LANGUAGE_MAP = {
    ".cjs": "javascript",
    ".cts": "typescript",
    ".js": "tsx",
    ".jsx": "tsx",
    ".mjs": "javascript",
    ".mts": "typescript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

_SUPPORTED_LANGUAGES = {"javascript", "tsx", "typescript"}

_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")

_EXCLUDED_DIRECTORIES = frozenset({"node_modules"})


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise UnsupportedLanguageError(f"Unsupported language '{language}'. Supported: {sorted(_SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return _EXTENSION_LANGUAGE_MAP[suffix]
    raise UnsupportedLanguageError(f"Unsupported file extension: {suffix}")


def resolve_language(language: str | None, file_path: Path | None) -> str:
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    raise UnsupportedLanguageError("Language must be provided when no file path is available.")


def is_declaration_file(file_path: Path) -> bool:
    return file_path.name.endswith(_DECLARATION_SUFFIXES)


def is_project_source(file_path: Path) -> bool:
    """True for script files the transform and checker should look at.

    Declaration files and anything below a dependency tree are skipped.
    """
    if file_path.suffix.lower() not in _EXTENSION_LANGUAGE_MAP:
        return False
    if is_declaration_file(file_path):
        return False
    return not _EXCLUDED_DIRECTORIES.intersection(file_path.parts)
