"""Unit tests for prop serializability classification and analysis."""

from collections.abc import Callable

import pytest
from tree_sitter import Node

from client_boundary.analysis.serializability import (
    DIAGNOSTIC_CODE,
    SERVER_ACTION_HINT,
    analyze_module,
    classify_type,
    find_usage_sites,
    is_server_action_name,
)
from client_boundary.analysis.syntactic_checker import SyntacticTypeChecker
from client_boundary.core.ast import SourceModule
from client_boundary.core.ports.checker import TypeFlags, TypeInfo
from client_boundary.core.scanner import find_client_imports
from client_boundary.models import DiagnosticCategory, NonSerializableReason


class _FixedTypeChecker:
    """Answers every lookup with the same type."""

    def __init__(self, type_info: TypeInfo | None) -> None:
        self.type_info = type_info
        self.calls = 0

    def type_at(self, module: SourceModule, node: Node) -> TypeInfo | None:
        self.calls += 1
        return self.type_info


class _FailingTypeChecker:
    def type_at(self, module: SourceModule, node: Node) -> TypeInfo | None:
        raise RuntimeError("checker crashed")


def _object(symbol: str | None, display: str = "T") -> TypeInfo:
    return TypeInfo(TypeFlags.OBJECT, display, symbol_name=symbol)


@pytest.mark.parametrize(
    ("type_info", "text"),
    [
        (TypeInfo(TypeFlags.STRING, "string"), "name"),
        (TypeInfo(TypeFlags.NUMBER_LITERAL, "5"), "5"),
        (TypeInfo(TypeFlags.BIGINT, "bigint"), "1n"),
        (TypeInfo(TypeFlags.BOOLEAN, "boolean"), "flag"),
        (TypeInfo(TypeFlags.UNDEFINED, "undefined"), "undefined"),
        (TypeInfo(TypeFlags.NULL, "null"), "null"),
        (_object("Map"), "new Map()"),
        (_object("Uint8ClampedArray"), "bytes"),
        (_object(None, "{ a: number; }"), "{ a: 1 }"),
        (_object("__object"), "{}"),
        (_object("Object"), "obj"),
        (_object("JSXElement"), "<div />"),
        (_object("Promise"), "promise"),
        (TypeInfo(TypeFlags.ES_SYMBOL, "symbol"), "Symbol.for('key')"),
    ],
    ids=[
        "string",
        "number-literal",
        "bigint",
        "boolean",
        "undefined",
        "null",
        "map",
        "typed-array",
        "anonymous-object",
        "object-literal-symbol",
        "object",
        "jsx-element",
        "promise",
        "registered-symbol",
    ],
)
def test_serializable_types(type_info: TypeInfo, text: str) -> None:
    assert classify_type("value", type_info, text).serializable


@pytest.mark.parametrize(
    ("type_info", "text", "reason"),
    [
        (TypeInfo(TypeFlags.ES_SYMBOL, "symbol"), "Symbol('local')", NonSerializableReason.UNREGISTERED_SYMBOL),
        (_object("SomeOpaqueClass"), "new SomeOpaqueClass()", NonSerializableReason.OPAQUE_OBJECT),
        (_object("WeakMap"), "new WeakMap()", NonSerializableReason.NOT_AN_ALLOWED_CONTAINER),
        (TypeInfo(TypeFlags.ANY, "any"), "value", NonSerializableReason.UNSUPPORTED_TYPE),
        (TypeInfo(TypeFlags.UNION, "string | Date"), "value", NonSerializableReason.UNSUPPORTED_TYPE),
    ],
    ids=["unregistered-symbol", "opaque-class", "weak-map", "any", "union"],
)
def test_non_serializable_types(type_info: TypeInfo, text: str, reason: NonSerializableReason) -> None:
    verdict = classify_type("value", type_info, text)
    assert not verdict.serializable
    assert verdict.reason is reason


def test_containers_are_accepted_by_name_only() -> None:
    # Element types are not inspected: a Map of functions still passes.
    assert classify_type("value", _object("Map", "Map<string, () => void>")).serializable


class TestCallableProps:
    def test_plain_callback_is_rejected(self) -> None:
        fn = TypeInfo(TypeFlags.OBJECT, "() => void", call_signatures=1)
        verdict = classify_type("onClick", fn)
        assert verdict.reason is NonSerializableReason.NON_CONFORMING_FUNCTION

    @pytest.mark.parametrize("name", ["action", "onSubmitAction", "Action", "deleteAction"])
    def test_action_names_are_accepted(self, name: str) -> None:
        fn = TypeInfo(TypeFlags.OBJECT, "() => Promise<void>", call_signatures=1)
        assert is_server_action_name(name)
        assert classify_type(name, fn).serializable

    @pytest.mark.parametrize("name", ["actions", "onAction2", "Actionable", "reaction"])
    def test_near_misses_are_rejected(self, name: str) -> None:
        assert not is_server_action_name(name)


_SCENARIOS = """\
import { Widget } from './widget' with { use: 'client' };
import { Other } from './other';

class SomeOpaqueClass {}
function fn() {}

export default function Page() {
  return (
    <Widget
      count={5}
      data={new Map()}
      onClick={() => {}}
      onSubmitAction={fn}
      handler={new SomeOpaqueClass()}
      label="plain"
      disabled
    >
      <Other onClick={() => {}} />
    </Widget>
  );
}
"""


class TestAnalyzeModule:
    def test_scenarios(self, parse_tsx: Callable[..., SourceModule]) -> None:
        module = parse_tsx(_SCENARIOS)
        diagnostics = analyze_module(module, SyntacticTypeChecker())

        assert [d.reason for d in diagnostics] == [
            NonSerializableReason.NON_CONFORMING_FUNCTION,
            NonSerializableReason.OPAQUE_OBJECT,
        ]
        on_click, handler = diagnostics
        assert on_click.message_text.startswith("Non-serializable prop 'onClick' of type '() => void'.")
        assert SERVER_ACTION_HINT in on_click.message_text
        assert handler.message_text.startswith("Non-serializable prop 'handler' of type 'SomeOpaqueClass'.")
        assert SERVER_ACTION_HINT not in handler.message_text

    def test_diagnostic_is_anchored_at_the_attribute(self, parse_tsx: Callable[..., SourceModule]) -> None:
        module = parse_tsx(_SCENARIOS)
        [on_click, _] = analyze_module(module, SyntacticTypeChecker())

        assert module.source[on_click.start : on_click.start + on_click.length] == b"onClick={() => {}}"
        assert on_click.line == 11
        assert on_click.column == 6
        assert on_click.file == str(module.path)
        assert on_click.code == DIAGNOSTIC_CODE
        assert on_click.category is DiagnosticCategory.ERROR

    def test_namespace_members_are_usage_sites(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = (
            "import * as ui from './ui' with { use: 'client' };\n"
            "export const page = <ui.Button onClick={() => {}} count={1} />;\n"
        )
        diagnostics = analyze_module(parse_tsx(source), SyntacticTypeChecker())
        assert len(diagnostics) == 1
        assert "'onClick'" in diagnostics[0].message_text

    def test_aliased_and_default_bindings_are_usage_sites(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = (
            "import Dialog, { Panel as Side } from './ui' with { use: 'client' };\n"
            "export const a = <Dialog onClose={() => {}} />;\n"
            "export const b = <Side onOpen={() => {}} />;\n"
            "export const c = <Panel onOpen={() => {}} />;\n"
        )
        module = parse_tsx(source)
        [client_import] = find_client_imports(module)

        assert len(find_usage_sites(module, client_import)) == 2
        assert len(analyze_module(module, SyntacticTypeChecker())) == 2

    def test_unresolved_types_produce_nothing(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = (
            "import { Widget } from './widget' with { use: 'client' };\n"
            "import { helper } from './helper';\n"
            "export const page = <Widget value={helper} other={props.value} {...rest} />;\n"
        )
        assert analyze_module(parse_tsx(source), SyntacticTypeChecker()) == []

    def test_checker_failures_are_skipped(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = "import { Widget } from './widget' with { use: 'client' };\nexport const page = <Widget a={1} />;\n"
        assert analyze_module(parse_tsx(source), _FailingTypeChecker()) == []

    def test_one_lookup_per_expression_attribute(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = (
            "import { Widget } from './widget' with { use: 'client' };\n"
            'export const page = <Widget a={1} b="two" c d={4}>child</Widget>;\n'
        )
        checker = _FixedTypeChecker(_object("Opaque"))
        diagnostics = analyze_module(parse_tsx(source), checker)

        assert checker.calls == 2
        assert len(diagnostics) == 2

    def test_analysis_is_idempotent(self, parse_tsx: Callable[..., SourceModule]) -> None:
        module = parse_tsx(_SCENARIOS)
        checker = SyntacticTypeChecker()
        assert analyze_module(module, checker) == analyze_module(module, checker)

    def test_files_without_markers_have_no_diagnostics(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = "import { Widget } from './widget';\nexport const page = <Widget onClick={() => {}} />;\n"
        assert analyze_module(parse_tsx(source), SyntacticTypeChecker()) == []


class TestDeclarationResolution:
    def test_class_reference_is_opaque(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = (
            "import { Widget } from './widget' with { use: 'client' };\n"
            "class Store {}\n"
            "export const page = <Widget store={Store} />;\n"
        )
        [diagnostic] = analyze_module(parse_tsx(source), SyntacticTypeChecker())
        assert diagnostic.reason is NonSerializableReason.OPAQUE_OBJECT
        assert "of type 'typeof Store'" in diagnostic.message_text

    def test_shadowed_local_is_not_used(self, parse_tsx: Callable[..., SourceModule]) -> None:
        source = (
            "import { Widget } from './widget' with { use: 'client' };\n"
            "const handler = 'ok';\n"
            "function helper() {\n"
            "  const handler = () => {};\n"
            "  return handler;\n"
            "}\n"
            "export const page = <Widget handler={handler} />;\n"
        )
        assert analyze_module(parse_tsx(source), SyntacticTypeChecker()) == []
