"""Unit tests for language detection and project-source filtering."""

from pathlib import Path

import pytest

from client_boundary.core.errors import UnsupportedLanguageError
from client_boundary.core.languages import (
    detect_language_from_path,
    is_declaration_file,
    is_project_source,
    normalize_language,
    resolve_language,
)


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [
        ("page.tsx", "tsx"),
        ("button.jsx", "tsx"),
        ("util.js", "tsx"),
        ("lib.ts", "typescript"),
        ("lib.mts", "typescript"),
        ("config.mjs", "javascript"),
        ("config.cjs", "javascript"),
    ],
)
def test_detect_language_from_path(file_name: str, expected: str) -> None:
    assert detect_language_from_path(Path(file_name)) == expected


def test_detect_language_rejects_unknown_suffix() -> None:
    with pytest.raises(UnsupportedLanguageError, match="Unsupported file extension"):
        detect_language_from_path(Path("styles.css"))


def test_normalize_language_aliases() -> None:
    assert normalize_language(" TS ") == "typescript"
    assert normalize_language("js") == "javascript"


def test_unsupported_language_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        normalize_language("python")


def test_resolve_language_prefers_explicit_language() -> None:
    assert resolve_language("typescript", Path("page.tsx")) == "typescript"
    assert resolve_language(None, Path("page.tsx")) == "tsx"


def test_resolve_language_requires_some_hint() -> None:
    with pytest.raises(UnsupportedLanguageError):
        resolve_language(None, None)


class TestIsProjectSource:
    def test_accepts_components(self) -> None:
        assert is_project_source(Path("src/components/counter.tsx")) is True

    def test_rejects_declaration_files(self) -> None:
        assert is_declaration_file(Path("next-env.d.ts")) is True
        assert is_project_source(Path("next-env.d.ts")) is False

    def test_rejects_dependency_tree(self) -> None:
        assert is_project_source(Path("node_modules/react/index.js")) is False

    def test_rejects_other_files(self) -> None:
        assert is_project_source(Path("README.md")) is False
