from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from client_boundary.core.errors import SourceParseError
from client_boundary.core.languages import resolve_language

_STRING_NODE_TYPES = frozenset({"string", "template_string"})


@dataclass(frozen=True, eq=False)
class SourceModule:
    """A parsed source file. Offsets in every derived node are byte offsets into ``source``."""

    path: Path
    source: bytes
    language: str
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")


def parse_source(source: str | bytes, path: str | Path, language: str | None = None) -> SourceModule:
    file_path = Path(path)
    resolved_language = resolve_language(language, file_path)
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    parser = get_parser(cast(SupportedLanguage, resolved_language))
    tree = parser.parse(source_bytes)
    return SourceModule(path=file_path, source=source_bytes, language=resolved_language, tree=tree)


def parse_file(path: str | Path, language: str | None = None) -> SourceModule:
    file_path = Path(path)
    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None
    return parse_source(source_bytes, file_path, language)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document (pre-)order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def syntax_errors(module: SourceModule) -> list[Node]:
    if not module.root.has_error:
        return []
    return [node for node in walk(module.root) if node.type == "ERROR" or node.is_missing]


def ensure_valid_syntax(module: SourceModule) -> None:
    errors = syntax_errors(module)
    if errors:
        row, column = errors[0].start_point
        raise SourceParseError(module.path, row, column)


def string_value(module: SourceModule, node: Node) -> str:
    """Return the contents of a string literal node without its quotes."""
    text = module.text(node)
    if node.type in _STRING_NODE_TYPES and len(text) >= 2:
        return text[1:-1]
    return text


def first_named_child(node: Node, *types: str) -> Node | None:
    for child in node.named_children:
        if not types or child.type in types:
            return child
    return None


def member_parts(module: SourceModule, node: Node) -> tuple[str, str] | None:
    """Split ``object.property`` into its two names when the object is a plain identifier."""
    if node.type not in ("member_expression", "nested_identifier"):
        return None
    named = [child for child in node.named_children if child.type != "comment"]
    if len(named) != 2:
        return None
    obj, prop = named
    if obj.type != "identifier" or prop.type not in ("property_identifier", "identifier"):
        return None
    return module.text(obj), module.text(prop)
