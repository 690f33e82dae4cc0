import os
from collections.abc import Sequence
from pathlib import Path

from client_boundary.core.ast import SourceModule
from client_boundary.core.scanner import ClientImport

_RELATIVE_PREFIXES = ("./", "../")


def relative_specifier(importer: Path, target: Path) -> str:
    """Path from the importer's directory to ``target``, always explicitly relative."""
    relative = Path(os.path.relpath(target, importer.parent)).as_posix()
    if relative.startswith(_RELATIVE_PREFIXES):
        return relative
    return f"./{relative}"


def rewrite_imports(module: SourceModule, replacements: Sequence[tuple[ClientImport, str]]) -> str:
    """Point each marked import at its new specifier and drop its attribute clause.

    Edits are byte ranges located on the parsed nodes; everything outside them,
    including the binding list, is copied through untouched.
    """
    if not replacements:
        return module.source.decode("utf-8")

    edits: list[tuple[int, int, bytes]] = []
    for client_import, specifier in replacements:
        quote = client_import.source[0] if client_import.source[:1] in ("'", '"') else "'"
        edits.append(
            (
                client_import.source_node.start_byte,
                client_import.source_node.end_byte,
                f"{quote}{specifier}{quote}".encode(),
            )
        )
        edits.append((client_import.source_node.end_byte, client_import.attribute_node.end_byte, b""))

    output = module.source
    for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
        output = output[:start] + replacement + output[end:]
    return output.decode("utf-8")
