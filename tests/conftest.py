"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from client_boundary.core.ast import SourceModule, parse_source
from client_boundary.core.emitter import BoundaryEmitter, GeneratedFileRegistry
from client_boundary.store import InMemoryModuleStore

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tsx_parser() -> Parser:
    """Return a tree-sitter parser for TSX."""
    return get_parser("tsx")


@pytest.fixture
def parse_tsx() -> Callable[..., SourceModule]:
    """Parse a TSX snippet as if it lived at ``path``."""

    def _parse(source: str, path: str = "/project/app/page.tsx") -> SourceModule:
        return parse_source(source, path)

    return _parse


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A project directory holding a package manifest."""
    (tmp_path / "package.json").write_text('{"name": "app"}', encoding="utf-8")
    return tmp_path


@pytest.fixture
def store() -> InMemoryModuleStore:
    return InMemoryModuleStore()


@pytest.fixture
def registry() -> GeneratedFileRegistry:
    return GeneratedFileRegistry()


@pytest.fixture
def emitter(store: InMemoryModuleStore, registry: GeneratedFileRegistry) -> BoundaryEmitter:
    return BoundaryEmitter(store, registry)
