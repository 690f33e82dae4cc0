"""A type oracle that reads types off expression syntax and local declarations.

It answers the ``TypeChecker`` port without a TypeScript program: literals,
constructor calls, function expressions, JSX and annotated declarations in the
same file resolve to a type, everything else (imports, property accesses,
awaited values) is reported as unknown (``None``).
"""

from tree_sitter import Node

from client_boundary.core.ast import SourceModule, first_named_child, member_parts, walk
from client_boundary.core.ports.checker import TypeFlags, TypeInfo

_MAX_DEPTH = 8

_PREDEFINED_TYPES = {
    "string": TypeInfo(TypeFlags.STRING, "string"),
    "number": TypeInfo(TypeFlags.NUMBER, "number"),
    "boolean": TypeInfo(TypeFlags.BOOLEAN, "boolean"),
    "bigint": TypeInfo(TypeFlags.BIGINT, "bigint"),
    "symbol": TypeInfo(TypeFlags.ES_SYMBOL, "symbol"),
    "unique symbol": TypeInfo(TypeFlags.ES_SYMBOL, "unique symbol"),
    "undefined": TypeInfo(TypeFlags.UNDEFINED, "undefined"),
    "null": TypeInfo(TypeFlags.NULL, "null"),
    "void": TypeInfo(TypeFlags.VOID, "void"),
    "never": TypeInfo(TypeFlags.NEVER, "never"),
    "any": TypeInfo(TypeFlags.ANY, "any"),
    "unknown": TypeInfo(TypeFlags.UNKNOWN, "unknown"),
    "object": TypeInfo(TypeFlags.OBJECT, "object"),
}

_JSX_ELEMENT = TypeInfo(TypeFlags.OBJECT, "JSX.Element", symbol_name="JSXElement")
_JSX_ELEMENT_TYPE_NAMES = frozenset({"JSX.Element", "React.JSX.Element", "ReactElement", "React.ReactElement"})

_PROMISE_FACTORIES = frozenset({"Promise.resolve", "Promise.reject", "Promise.all", "Promise.allSettled", "fetch"})
_PRIMITIVE_FACTORIES = {
    "String": _PREDEFINED_TYPES["string"],
    "Number": _PREDEFINED_TYPES["number"],
    "Boolean": _PREDEFINED_TYPES["boolean"],
    "BigInt": _PREDEFINED_TYPES["bigint"],
}

_BOOLEAN_OPERATORS = frozenset({"===", "!==", "==", "!=", "<", ">", "<=", ">=", "instanceof", "in"})
_NUMERIC_OPERATORS = frozenset({"-", "*", "/", "%", "**", "|", "&", "^", "<<", ">>", ">>>"})

_FUNCTION_EXPRESSIONS = frozenset({"arrow_function", "function_expression", "function", "generator_function"})
_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})
_CLASS_DECLARATIONS = frozenset({"class_declaration", "abstract_class_declaration"})
_PARAMETERS = frozenset({"required_parameter", "optional_parameter"})
_FUNCTION_SCOPES = frozenset({*_FUNCTION_EXPRESSIONS, *_FUNCTION_DECLARATIONS, "method_definition", "program"})
_BLOCK_SCOPES = frozenset({"statement_block", "program", "for_statement", "for_in_statement"})


def _strip_annotation(node: Node | None) -> Node | None:
    """``type_annotation`` wraps the real type behind a colon."""
    if node is not None and node.type == "type_annotation":
        return first_named_child(node)
    return node


def _function_type(module: SourceModule, node: Node) -> TypeInfo:
    params = node.child_by_field_name("parameters")
    if params is not None:
        params_text = module.text(params)
    else:
        single = node.child_by_field_name("parameter")
        params_text = f"({module.text(single)})" if single is not None else "()"

    return_type = _strip_annotation(node.child_by_field_name("return_type"))
    if return_type is not None:
        returns = module.text(return_type)
    else:
        body = node.child_by_field_name("body")
        returns = "void" if body is None or body.type == "statement_block" else "any"
    return TypeInfo(TypeFlags.OBJECT, f"{params_text} => {returns}", call_signatures=1)


class SyntacticTypeChecker:
    """Implements the ``TypeChecker`` protocol from syntax alone."""

    def type_at(self, module: SourceModule, node: Node) -> TypeInfo | None:
        return self._infer(module, node, 0)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _infer(self, module: SourceModule, node: Node, depth: int) -> TypeInfo | None:
        if depth > _MAX_DEPTH:
            return None
        kind = node.type
        text = module.text(node)

        if kind == "number":
            if text.endswith("n"):
                return TypeInfo(TypeFlags.BIGINT_LITERAL, text)
            return TypeInfo(TypeFlags.NUMBER_LITERAL, text)
        if kind == "string":
            return TypeInfo(TypeFlags.STRING_LITERAL, text)
        if kind == "template_string":
            return _PREDEFINED_TYPES["string"]
        if kind in ("true", "false"):
            return TypeInfo(TypeFlags.BOOLEAN_LITERAL, text)
        if kind == "null":
            return _PREDEFINED_TYPES["null"]
        if kind == "undefined" or (kind == "identifier" and text == "undefined"):
            return _PREDEFINED_TYPES["undefined"]
        if kind == "regex":
            return TypeInfo(TypeFlags.OBJECT, "RegExp", symbol_name="RegExp")
        if kind in ("jsx_element", "jsx_self_closing_element", "jsx_fragment"):
            return _JSX_ELEMENT
        if kind in _FUNCTION_EXPRESSIONS:
            return _function_type(module, node)
        if kind == "class":
            name = node.child_by_field_name("name")
            class_name = module.text(name) if name is not None else "(Anonymous class)"
            return TypeInfo(TypeFlags.OBJECT, f"typeof {class_name}", symbol_name=class_name)
        if kind == "object":
            return self._object_type(module, node, depth)
        if kind == "array":
            return self._array_type(module, node, depth)
        if kind == "new_expression":
            return self._constructed_type(module, node)
        if kind == "call_expression":
            return self._call_type(module, node, depth)
        if kind in ("parenthesized_expression", "non_null_expression", "satisfies_expression"):
            inner = first_named_child(node)
            return self._infer(module, inner, depth + 1) if inner is not None else None
        if kind == "as_expression":
            named = node.named_children
            if len(named) == 2:
                return self._annotation_type(module, named[1])
            # `as const` keeps the expression type
            return self._infer(module, named[0], depth + 1) if named else None
        if kind == "unary_expression":
            return self._unary_type(module, node)
        if kind == "binary_expression":
            return self._binary_type(module, node, depth)
        if kind == "identifier":
            return self._resolve_identifier(module, node, depth)
        return None

    def _object_type(self, module: SourceModule, node: Node, depth: int) -> TypeInfo:
        members = []
        for child in node.named_children:
            if child.type == "pair":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                value_type = self._infer(module, value, depth + 1) if value is not None else None
                key_text = module.text(key) if key is not None else "?"
                members.append(f"{key_text}: {value_type.display if value_type else 'any'};")
            elif child.type == "shorthand_property_identifier":
                value_type = self._resolve_identifier(module, child, depth + 1)
                members.append(f"{module.text(child)}: {value_type.display if value_type else 'any'};")
            elif child.type == "method_definition":
                name = child.child_by_field_name("name")
                members.append(f"{module.text(name) if name is not None else '?'}(): any;")
        display = f"{{ {' '.join(members)} }}" if members else "{}"
        return TypeInfo(TypeFlags.OBJECT, display)

    def _array_type(self, module: SourceModule, node: Node, depth: int) -> TypeInfo:
        elements = [child for child in node.named_children if child.type != "comment"]
        element_type = self._infer(module, elements[0], depth + 1) if elements else None
        if element_type is None:
            display = "never[]" if not elements else "any[]"
        else:
            display = f"{_widen(element_type).display}[]"
        return TypeInfo(TypeFlags.OBJECT, display, symbol_name="Array")

    def _constructed_type(self, module: SourceModule, node: Node) -> TypeInfo | None:
        constructor = node.child_by_field_name("constructor")
        if constructor is None:
            return None
        parts = member_parts(module, constructor)
        name = parts[1] if parts is not None else module.text(constructor)
        arguments = node.child_by_field_name("type_arguments")
        display = f"{name}{module.text(arguments)}" if arguments is not None else name
        return TypeInfo(TypeFlags.OBJECT, display, symbol_name=name)

    def _call_type(self, module: SourceModule, node: Node, depth: int) -> TypeInfo | None:
        function = node.child_by_field_name("function")
        if function is None:
            return None
        callee = module.text(function)
        if callee in ("Symbol", "Symbol.for"):
            return _PREDEFINED_TYPES["symbol"]
        if callee in _PRIMITIVE_FACTORIES:
            return _PRIMITIVE_FACTORIES[callee]
        if callee in _PROMISE_FACTORIES:
            return TypeInfo(TypeFlags.OBJECT, "Promise<any>", symbol_name="Promise")
        if function.type != "identifier":
            return None

        declaration = self._find_declaration(module, function)
        if declaration is None or declaration.type not in _FUNCTION_DECLARATIONS:
            return None
        return_type = _strip_annotation(declaration.child_by_field_name("return_type"))
        return self._annotation_type(module, return_type) if return_type is not None else None

    def _unary_type(self, module: SourceModule, node: Node) -> TypeInfo | None:
        operator = node.child_by_field_name("operator")
        op = module.text(operator) if operator is not None else ""
        if op == "!":
            return _PREDEFINED_TYPES["boolean"]
        if op == "typeof":
            return _PREDEFINED_TYPES["string"]
        if op in ("-", "+", "~"):
            return _PREDEFINED_TYPES["number"]
        if op == "void":
            return _PREDEFINED_TYPES["undefined"]
        return None

    def _binary_type(self, module: SourceModule, node: Node, depth: int) -> TypeInfo | None:
        operator = node.child_by_field_name("operator")
        op = module.text(operator) if operator is not None else ""
        if op in _BOOLEAN_OPERATORS:
            return _PREDEFINED_TYPES["boolean"]
        if op in _NUMERIC_OPERATORS:
            return _PREDEFINED_TYPES["number"]
        if op != "+":
            return None

        operands = [node.child_by_field_name("left"), node.child_by_field_name("right")]
        types = [self._infer(module, operand, depth + 1) if operand is not None else None for operand in operands]
        if any(t is not None and t.flags & (TypeFlags.STRING | TypeFlags.STRING_LITERAL) for t in types):
            return _PREDEFINED_TYPES["string"]
        if all(t is not None and t.flags & (TypeFlags.NUMBER | TypeFlags.NUMBER_LITERAL) for t in types):
            return _PREDEFINED_TYPES["number"]
        return None

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _find_declaration(self, module: SourceModule, identifier: Node) -> Node | None:
        """Same-file declaration of ``identifier`` visible at its position.

        Only declarations whose scope encloses the identifier count, and the
        innermost scope wins. Within that scope the latest declaration before the
        use site is taken, falling back to the first one after it (hoisting).
        """
        name = module.text(identifier)
        visible: list[tuple[int, Node]] = []
        for node in walk(module.root):
            if node.type in ("variable_declarator", *_FUNCTION_DECLARATIONS):
                target = node.child_by_field_name("name")
                name_types: tuple[str, ...] = ("identifier",)
            elif node.type in _CLASS_DECLARATIONS:
                target = node.child_by_field_name("name")
                name_types = ("type_identifier", "identifier")
            elif node.type in _PARAMETERS:
                target = node.child_by_field_name("pattern")
                name_types = ("identifier",)
            else:
                continue
            if target is None or target.type not in name_types or module.text(target) != name:
                continue
            if target.start_byte == identifier.start_byte:
                continue
            scope = _declaration_scope(node)
            if scope is None or not _encloses(scope, identifier):
                continue
            visible.append((scope.end_byte - scope.start_byte, node))

        if not visible:
            return None
        innermost = min(size for size, _ in visible)
        candidates = [node for size, node in visible if size == innermost]
        before = [node for node in candidates if node.start_byte < identifier.start_byte]
        return before[-1] if before else candidates[0]

    def _resolve_identifier(self, module: SourceModule, identifier: Node, depth: int) -> TypeInfo | None:
        declaration = self._find_declaration(module, identifier)
        if declaration is None:
            return None

        if declaration.type in _FUNCTION_DECLARATIONS:
            return _function_type(module, declaration)
        if declaration.type in _CLASS_DECLARATIONS:
            name = module.text(identifier)
            return TypeInfo(TypeFlags.OBJECT, f"typeof {name}", symbol_name=name)

        annotation = _strip_annotation(declaration.child_by_field_name("type"))
        if annotation is not None:
            return self._annotation_type(module, annotation)
        if declaration.type == "variable_declarator":
            value = declaration.child_by_field_name("value")
            if value is not None:
                inferred = self._infer(module, value, depth + 1)
                if inferred is not None and _is_mutable_binding(declaration):
                    return _widen(inferred)
                return inferred
        return None

    # ------------------------------------------------------------------
    # Type annotations
    # ------------------------------------------------------------------

    def _annotation_type(self, module: SourceModule, node: Node) -> TypeInfo | None:
        kind = node.type
        text = module.text(node)

        if kind == "predefined_type":
            return _PREDEFINED_TYPES.get(text)
        if kind == "literal_type":
            literal = first_named_child(node)
            return self._infer(module, literal, 0) if literal is not None else None
        if kind in ("parenthesized_type", "readonly_type"):
            inner = first_named_child(node)
            return self._annotation_type(module, inner) if inner is not None else None
        if kind in ("array_type", "tuple_type"):
            return TypeInfo(TypeFlags.OBJECT, text, symbol_name="Array")
        if kind == "function_type":
            return TypeInfo(TypeFlags.OBJECT, text, call_signatures=1)
        if kind == "object_type":
            return TypeInfo(TypeFlags.OBJECT, text)
        if kind == "union_type":
            return TypeInfo(TypeFlags.UNION, text)
        if kind in ("type_identifier", "nested_type_identifier", "generic_type"):
            name_node = node.child_by_field_name("name") if kind == "generic_type" else node
            name = module.text(name_node) if name_node is not None else text
            if name in _JSX_ELEMENT_TYPE_NAMES:
                return _JSX_ELEMENT
            if name in _PREDEFINED_TYPES:
                return _PREDEFINED_TYPES[name]
            return TypeInfo(TypeFlags.OBJECT, text, symbol_name=name.rsplit(".", 1)[-1])
        return None


def _is_mutable_binding(declarator: Node) -> bool:
    parent = declarator.parent
    if parent is None:
        return False
    if parent.type == "variable_declaration":
        return True
    kind = parent.child_by_field_name("kind")
    return parent.type == "lexical_declaration" and kind is not None and kind.type == "let"


def _widen(type_info: TypeInfo) -> TypeInfo:
    """Literal types widen to their primitive the way a mutable binding does."""
    widening = (
        (TypeFlags.STRING_LITERAL, "string"),
        (TypeFlags.NUMBER_LITERAL, "number"),
        (TypeFlags.BOOLEAN_LITERAL, "boolean"),
        (TypeFlags.BIGINT_LITERAL, "bigint"),
    )
    for flag, name in widening:
        if type_info.flags & flag:
            return _PREDEFINED_TYPES[name]
    return type_info


def _enclosing(node: Node, kinds: frozenset[str]) -> Node | None:
    current = node.parent
    while current is not None and current.type not in kinds:
        current = current.parent
    return current


def _declaration_scope(declaration: Node) -> Node | None:
    """The node whose extent a declaration's binding is visible in."""
    if declaration.type in _PARAMETERS:
        return _enclosing(declaration, _FUNCTION_SCOPES)
    parent = declaration.parent
    if declaration.type == "variable_declarator" and parent is not None and parent.type == "variable_declaration":
        # `var` is function scoped
        return _enclosing(declaration, _FUNCTION_SCOPES)
    return _enclosing(declaration, _BLOCK_SCOPES)


def _encloses(scope: Node, node: Node) -> bool:
    return scope.start_byte <= node.start_byte and node.end_byte <= scope.end_byte
