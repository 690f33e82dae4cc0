import logging
from pathlib import Path

from client_boundary.core.ast import ensure_valid_syntax, parse_source
from client_boundary.core.emitter import BoundaryEmitter
from client_boundary.core.rewriter import relative_specifier, rewrite_imports
from client_boundary.core.scanner import find_client_imports
from client_boundary.core.synthesizer import synthesize_boundary

logger = logging.getLogger(__name__)


def transform_source(
    path: str | Path,
    source: str,
    emitter: BoundaryEmitter,
    project_root: Path,
    language: str | None = None,
) -> str:
    """Run scan → synthesize → emit → rewrite over one file.

    Returns ``source`` itself when the file has no marked import. A file that has
    marked imports but does not parse cleanly raises ``SourceParseError``.
    """
    file_path = Path(path).absolute()
    module = parse_source(source, file_path, language)
    client_imports = find_client_imports(module)
    if not client_imports:
        return source

    ensure_valid_syntax(module)

    replacements = []
    for client_import in client_imports:
        boundary = synthesize_boundary(client_import, module, project_root.absolute())
        emitter.emit(boundary)
        replacements.append((client_import, relative_specifier(file_path, boundary.path)))

    logger.debug("Rewrote %d client import(s) in %s", len(replacements), file_path)
    return rewrite_imports(module, replacements)
