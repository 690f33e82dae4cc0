import json
import logging
import os
import re
from fnmatch import fnmatch
from pathlib import Path

from pydantic import ValidationError

from client_boundary.core.errors import ConfigDiscoveryError, ConfigParseError
from client_boundary.core.languages import is_project_source
from client_boundary.models import ProjectConfig

logger = logging.getLogger(__name__)

GENERATED_DIR = Path(".generated") / "boundaries"
ATTR_NAME = "use"
CLIENT_ENV = "client"
PROJECT_MANIFEST = "package.json"
CONFIG_FILE_NAME = "tsconfig.json"
LOG_LEVEL_ENV = "CLIENT_BOUNDARY_LOG_LEVEL"

_DEFAULT_INCLUDE = ["**/*"]
_DEFAULT_EXCLUDE = ["node_modules", GENERATED_DIR.as_posix()]

# Strings are matched first so comment markers inside them survive.
_JSONC_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_JSONC_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def get_log_level() -> str:
    return os.getenv(LOG_LEVEL_ENV, "WARNING").upper()


def find_project_root(start: Path | None = None) -> Path:
    """Return the nearest ancestor of ``start`` holding a package manifest, else the working directory."""
    current = (start or Path.cwd()).absolute()
    for directory in (current, *current.parents):
        if (directory / PROJECT_MANIFEST).is_file():
            return directory
    return Path.cwd()


def find_config_file(start: Path | None = None, file_name: str = CONFIG_FILE_NAME) -> Path:
    current = (start or Path.cwd()).absolute()
    for directory in (current, *current.parents):
        candidate = directory / file_name
        if candidate.is_file():
            return candidate
    raise ConfigDiscoveryError(current, file_name)


def _strip_jsonc(text: str) -> str:
    without_comments = _JSONC_COMMENT_RE.sub(lambda m: m.group(1) or "", text)
    return _JSONC_TRAILING_COMMA_RE.sub(r"\1", without_comments)


def load_project_config(config_path: Path) -> ProjectConfig:
    try:
        raw = json.loads(_strip_jsonc(config_path.read_text(encoding="utf-8")))
    except OSError as exc:
        raise ConfigParseError(config_path, str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ConfigParseError(config_path, exc.msg) from exc

    if not isinstance(raw, dict):
        raise ConfigParseError(config_path, "expected a JSON object")

    try:
        return ProjectConfig(
            config_path=config_path,
            root_dir=config_path.parent,
            files=raw.get("files", []),
            include=raw.get("include", []),
            exclude=raw.get("exclude", []),
        )
    except ValidationError as exc:
        raise ConfigParseError(config_path, str(exc)) from exc


def _is_excluded(relative: str, patterns: list[str]) -> bool:
    for pattern in patterns:
        pattern = pattern.rstrip("/")
        if fnmatch(relative, pattern) or relative.startswith(f"{pattern}/"):
            return True
    return False


def collect_project_files(config: ProjectConfig) -> list[Path]:
    """Expand ``files``/``include``/``exclude`` into the sorted list of checkable sources."""
    root = config.root_dir
    exclude = config.exclude or _DEFAULT_EXCLUDE
    candidates: set[Path] = {root / name for name in config.files}

    patterns = config.include or ([] if config.files else _DEFAULT_INCLUDE)
    for pattern in patterns:
        target = root / pattern
        matches = target.rglob("*") if target.is_dir() else root.glob(pattern)
        candidates.update(matches)

    selected = []
    for path in candidates:
        if not path.is_file() or not is_project_source(path):
            continue
        if _is_excluded(Path(os.path.relpath(path, root)).as_posix(), exclude):
            continue
        selected.append(path)

    logger.debug("Collected %d project file(s) from %s", len(selected), config.config_path)
    return sorted(selected)
