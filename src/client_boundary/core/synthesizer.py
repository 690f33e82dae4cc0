import hashlib
from collections.abc import Iterable
from pathlib import Path

from client_boundary.core.ast import SourceModule, member_parts, walk
from client_boundary.core.emitter import boundary_path
from client_boundary.core.scanner import ClientImport
from client_boundary.models import BoundaryModule

BOUNDARY_ID_LENGTH = 8


def normalize_import(client_import: ClientImport) -> str:
    """Render the import from its parsed parts, without the attribute clause.

    Whitespace and comments of the original statement do not leak into the result,
    so two spellings of the same import share one boundary.
    """
    kind = "type " if client_import.type_only else ""
    if not client_import.has_clause:
        return f"import {client_import.source};"

    parts: list[str] = []
    if client_import.default:
        parts.append(client_import.default)
    if client_import.namespace:
        parts.append(f"* as {client_import.namespace}")
    elif client_import.named or not client_import.default:
        parts.append(_braced(spec.render() for spec in client_import.named))
    return f"import {kind}{', '.join(parts)} from {client_import.source};"


def compute_boundary_id(normalized_import: str) -> str:
    return hashlib.sha256(normalized_import.encode("utf-8")).hexdigest()[:BOUNDARY_ID_LENGTH]


def collect_namespace_members(module: SourceModule, namespace: str) -> list[str]:
    """Distinct ``namespace.Member`` names across the whole module, in first-occurrence order."""
    members: dict[str, None] = {}
    for node in walk(module.root):
        parts = member_parts(module, node)
        if parts is not None and parts[0] == namespace:
            members.setdefault(parts[1], None)
    return list(members)


def render_export(client_import: ClientImport, module: SourceModule) -> str:
    kind = "type " if client_import.type_only else ""
    names: list[str] = []
    if client_import.default:
        names.append("default")
    if client_import.namespace:
        names.extend(collect_namespace_members(module, client_import.namespace))
    else:
        names.extend(spec.render() for spec in client_import.named)
    return f"export {kind}{_braced(names)} from {client_import.source};"


def synthesize_boundary(client_import: ClientImport, module: SourceModule, project_root: Path) -> BoundaryModule:
    boundary_id = compute_boundary_id(normalize_import(client_import))
    return BoundaryModule(
        boundary_id=boundary_id,
        path=boundary_path(project_root, boundary_id),
        export_statement=render_export(client_import, module),
    )


def _braced(names: Iterable[str]) -> str:
    joined = ", ".join(names)
    return f"{{ {joined} }}" if joined else "{}"
