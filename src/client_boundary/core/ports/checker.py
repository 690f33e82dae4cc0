from dataclasses import dataclass
from enum import IntFlag
from typing import Protocol

from tree_sitter import Node

from client_boundary.core.ast import SourceModule


class TypeFlags(IntFlag):
    NONE = 0
    ANY = 1 << 0
    UNKNOWN = 1 << 1
    STRING = 1 << 2
    NUMBER = 1 << 3
    BOOLEAN = 1 << 4
    BIGINT = 1 << 5
    STRING_LITERAL = 1 << 6
    NUMBER_LITERAL = 1 << 7
    BOOLEAN_LITERAL = 1 << 8
    BIGINT_LITERAL = 1 << 9
    ES_SYMBOL = 1 << 10
    VOID = 1 << 11
    UNDEFINED = 1 << 12
    NULL = 1 << 13
    NEVER = 1 << 14
    OBJECT = 1 << 15
    UNION = 1 << 16

    PRIMITIVE = (
        STRING
        | NUMBER
        | BOOLEAN
        | BIGINT
        | STRING_LITERAL
        | NUMBER_LITERAL
        | BOOLEAN_LITERAL
        | BIGINT_LITERAL
        | UNDEFINED
        | NULL
    )


@dataclass(frozen=True)
class TypeInfo:
    """What a type checker reports about an expression's type."""

    flags: TypeFlags
    display: str
    symbol_name: str | None = None
    call_signatures: int = 0


class TypeChecker(Protocol):
    def type_at(self, module: SourceModule, node: Node) -> TypeInfo | None: ...
