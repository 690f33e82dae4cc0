"""Static serializability checks for props passed across a client boundary.

Classification is shallow and keyed on the symbol name of the prop's type:
containers are accepted by name without looking at their element types, and
promises without looking at what they resolve to.
"""

import logging
from dataclasses import dataclass

from tree_sitter import Node

from client_boundary.core.ast import SourceModule, first_named_child, walk
from client_boundary.core.ports.checker import TypeChecker, TypeFlags, TypeInfo
from client_boundary.core.scanner import ClientImport, find_client_imports
from client_boundary.models import Diagnostic, DiagnosticCategory, NonSerializableReason

logger = logging.getLogger(__name__)

DIAGNOSTIC_CODE = 100001
LEARN_MORE_URL = "https://react.dev/reference/rsc/use-client#serializable-types"
SERVER_ACTION_HINT = ' Did you forget to suffix a server action prop with "Action"?'

SERIALIZABLE_CONTAINERS = frozenset(
    {
        "Array",
        "Set",
        "Map",
        "Int8Array",
        "Uint8Array",
        "Uint8ClampedArray",
        "Int16Array",
        "Uint16Array",
        "Int32Array",
        "Uint32Array",
        "Float32Array",
        "Float64Array",
        "BigInt64Array",
        "BigUint64Array",
    }
)
NON_SERIALIZABLE_CONTAINERS = frozenset(
    {"WeakMap", "WeakSet", "WeakRef", "Iterator", "IterableIterator", "Generator", "AsyncGenerator"}
)
PLAIN_OBJECT_SYMBOLS = frozenset({"Object", "__object"})
JSX_ELEMENT_SYMBOL = "JSXElement"
PROMISE_SYMBOL = "Promise"
REGISTERED_SYMBOL_FACTORY = "Symbol.for"

_JSX_USAGE_TYPES = ("jsx_element", "jsx_self_closing_element")


@dataclass(frozen=True)
class SerializabilityVerdict:
    reason: NonSerializableReason | None = None

    @property
    def serializable(self) -> bool:
        return self.reason is None


SERIALIZABLE = SerializabilityVerdict()


def is_server_action_name(prop_name: str) -> bool:
    return prop_name == "action" or prop_name.endswith("Action")


def classify_type(prop_name: str, type_info: TypeInfo, expression_text: str = "") -> SerializabilityVerdict:
    if type_info.call_signatures:
        if is_server_action_name(prop_name):
            return SERIALIZABLE
        return SerializabilityVerdict(NonSerializableReason.NON_CONFORMING_FUNCTION)

    flags = type_info.flags
    symbol = type_info.symbol_name
    if flags & TypeFlags.PRIMITIVE:
        return SERIALIZABLE
    if symbol in SERIALIZABLE_CONTAINERS or symbol == PROMISE_SYMBOL:
        return SERIALIZABLE

    if flags & TypeFlags.ES_SYMBOL:
        # Textual on purpose: only the call site tells a registered symbol apart.
        if REGISTERED_SYMBOL_FACTORY in expression_text:
            return SERIALIZABLE
        return SerializabilityVerdict(NonSerializableReason.UNREGISTERED_SYMBOL)

    if flags & TypeFlags.OBJECT:
        if symbol is None or symbol in PLAIN_OBJECT_SYMBOLS or symbol == JSX_ELEMENT_SYMBOL:
            return SERIALIZABLE
        if symbol in NON_SERIALIZABLE_CONTAINERS:
            return SerializabilityVerdict(NonSerializableReason.NOT_AN_ALLOWED_CONTAINER)
        return SerializabilityVerdict(NonSerializableReason.OPAQUE_OBJECT)

    return SerializabilityVerdict(NonSerializableReason.UNSUPPORTED_TYPE)


def _opening_element(element: Node) -> Node | None:
    if element.type == "jsx_self_closing_element":
        return element
    return first_named_child(element, "jsx_opening_element")


def _tag_name_node(element: Node) -> Node | None:
    opening = _opening_element(element)
    return opening.child_by_field_name("name") if opening is not None else None


def find_usage_sites(module: SourceModule, client_import: ClientImport) -> list[Node]:
    """JSX elements whose tag is a binding of ``client_import`` or ``namespace.Member``."""
    names = client_import.local_names
    namespace = client_import.namespace
    usages = []
    for node in walk(module.root):
        if node.type not in _JSX_USAGE_TYPES:
            continue
        tag_node = _tag_name_node(node)
        if tag_node is None:
            continue
        tag = module.text(tag_node)
        if tag in names or (namespace is not None and tag.startswith(f"{namespace}.")):
            usages.append(node)
    return usages


def _attribute_expression(attribute: Node) -> tuple[Node, Node] | None:
    """Return (name, expression) for ``name={expression}`` attributes, else None."""
    named = [child for child in attribute.named_children if child.type != "comment"]
    if len(named) < 2 or named[-1].type != "jsx_expression":
        return None
    expression = first_named_child(named[-1])
    while expression is not None and expression.type == "comment":
        expression = expression.next_named_sibling
    if expression is None or expression.type == "spread_element":
        return None
    return named[0], expression


def build_diagnostic(
    module: SourceModule,
    attribute: Node,
    prop_name: str,
    type_info: TypeInfo,
    reason: NonSerializableReason,
) -> Diagnostic:
    hint = SERVER_ACTION_HINT if type_info.call_signatures else ""
    row, column = attribute.start_point
    return Diagnostic(
        file=str(module.path),
        start=attribute.start_byte,
        length=attribute.end_byte - attribute.start_byte,
        line=row,
        column=column,
        category=DiagnosticCategory.ERROR,
        code=DIAGNOSTIC_CODE,
        message_text=(
            f"Non-serializable prop '{prop_name}' of type '{type_info.display}'.{hint}\n\nLearn more: {LEARN_MORE_URL}"
        ),
        reason=reason,
    )


def validate_props(module: SourceModule, element: Node, checker: TypeChecker) -> list[Diagnostic]:
    opening = _opening_element(element)
    if opening is None:
        return []

    diagnostics = []
    for attribute in opening.named_children:
        if attribute.type != "jsx_attribute":
            continue
        parts = _attribute_expression(attribute)
        if parts is None:
            continue
        name_node, expression = parts
        prop_name = module.text(name_node)
        try:
            type_info = checker.type_at(module, expression)
        except Exception:
            logger.exception("Type lookup failed for prop '%s' in %s", prop_name, module.path)
            continue
        if type_info is None:
            continue

        verdict = classify_type(prop_name, type_info, module.text(expression))
        if verdict.reason is not None:
            diagnostics.append(build_diagnostic(module, attribute, prop_name, type_info, verdict.reason))
    return diagnostics


def analyze_module(module: SourceModule, checker: TypeChecker) -> list[Diagnostic]:
    """One diagnostic per non-serializable prop handed to a client-imported component."""
    diagnostics: list[Diagnostic] = []
    for client_import in find_client_imports(module):
        for usage in find_usage_sites(module, client_import):
            diagnostics.extend(validate_props(module, usage, checker))
    return diagnostics
