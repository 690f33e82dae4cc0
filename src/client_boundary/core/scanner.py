from dataclasses import dataclass

from tree_sitter import Node

from client_boundary.core.ast import SourceModule, first_named_child, string_value, walk
from client_boundary.core.config import ATTR_NAME, CLIENT_ENV


@dataclass(frozen=True)
class ImportSpecifier:
    name: str
    alias: str | None = None
    type_only: bool = False

    @property
    def local_name(self) -> str:
        return self.alias or self.name

    def render(self) -> str:
        prefix = "type " if self.type_only else ""
        suffix = f" as {self.alias}" if self.alias else ""
        return f"{prefix}{self.name}{suffix}"


@dataclass(frozen=True, eq=False)
class ClientImport:
    """An ``import_statement`` carrying ``with { use: 'client' }``."""

    node: Node
    source_node: Node
    attribute_node: Node
    source: str
    default: str | None = None
    named: tuple[ImportSpecifier, ...] = ()
    namespace: str | None = None
    type_only: bool = False
    has_clause: bool = False

    @property
    def local_names(self) -> set[str]:
        names = {spec.local_name for spec in self.named}
        if self.default:
            names.add(self.default)
        return names


def _attribute_key(module: SourceModule, key: Node) -> str:
    if key.type == "string":
        return string_value(module, key)
    return module.text(key)


def has_client_attribute(module: SourceModule, import_node: Node) -> bool:
    """Structural check for a ``use: 'client'`` entry in an import's attribute clause."""
    attribute = first_named_child(import_node, "import_attribute")
    if attribute is None:
        return False
    obj = first_named_child(attribute, "object")
    if obj is None:
        return False
    for pair in obj.named_children:
        if pair.type != "pair":
            continue
        key = pair.child_by_field_name("key")
        value = pair.child_by_field_name("value")
        if key is None or value is None or value.type != "string":
            continue
        if _attribute_key(module, key) == ATTR_NAME and string_value(module, value) == CLIENT_ENV:
            return True
    return False


def _parse_specifier(module: SourceModule, node: Node) -> ImportSpecifier:
    name = node.child_by_field_name("name")
    alias = node.child_by_field_name("alias")
    type_only = any(not child.is_named and child.type == "type" for child in node.children)
    return ImportSpecifier(
        name=module.text(name) if name is not None else module.text(node),
        alias=module.text(alias) if alias is not None else None,
        type_only=type_only,
    )


def _parse_client_import(module: SourceModule, node: Node) -> ClientImport | None:
    source_node = node.child_by_field_name("source")
    attribute_node = first_named_child(node, "import_attribute")
    if source_node is None or attribute_node is None:
        return None

    default: str | None = None
    namespace: str | None = None
    named: list[ImportSpecifier] = []
    clause = first_named_child(node, "import_clause")
    if clause is not None:
        for child in clause.named_children:
            if child.type == "identifier":
                default = module.text(child)
            elif child.type == "namespace_import":
                ident = first_named_child(child, "identifier")
                if ident is not None:
                    namespace = module.text(ident)
            elif child.type == "named_imports":
                named.extend(
                    _parse_specifier(module, spec) for spec in child.named_children if spec.type == "import_specifier"
                )

    return ClientImport(
        node=node,
        source_node=source_node,
        attribute_node=attribute_node,
        source=module.text(source_node),
        default=default,
        named=tuple(named),
        namespace=namespace,
        type_only=any(not child.is_named and child.type == "type" for child in node.children),
        has_clause=clause is not None,
    )


def find_client_imports(module: SourceModule) -> list[ClientImport]:
    """Return the marked imports of ``module`` in document order."""
    imports: list[ClientImport] = []
    for node in walk(module.root):
        if node.type != "import_statement" or not has_client_attribute(module, node):
            continue
        parsed = _parse_client_import(module, node)
        if parsed is not None:
            imports.append(parsed)
    return imports
