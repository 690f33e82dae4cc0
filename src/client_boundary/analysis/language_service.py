import logging
from typing import Any

from client_boundary.analysis.serializability import analyze_module
from client_boundary.core.ports.language_service import LanguageService, Program
from client_boundary.models import Diagnostic

logger = logging.getLogger(__name__)


class ClientBoundaryLanguageService:
    """Decorates a ``LanguageService`` with client boundary diagnostics.

    Only ``get_semantic_diagnostics`` is augmented; every other attribute is
    looked up on the wrapped service.
    """

    def __init__(self, inner: LanguageService) -> None:
        self._inner = inner
        logger.info("Client boundary language service ready")

    def __getattr__(self, name: str) -> Any:
        return getattr(self._inner, name)

    def get_program(self) -> Program | None:
        return self._inner.get_program()

    def get_semantic_diagnostics(self, file_name: str) -> list[Diagnostic]:
        prior = list(self._inner.get_semantic_diagnostics(file_name))
        program = self._inner.get_program()
        if program is None:
            return prior
        module = program.get_source_file(file_name)
        checker = program.get_type_checker()
        if module is None or checker is None:
            logger.debug("No type information for %s", file_name)
            return prior

        try:
            extra = analyze_module(module, checker)
        except Exception:
            logger.exception("Client boundary analysis failed for %s", file_name)
            return prior
        return [*prior, *extra]
