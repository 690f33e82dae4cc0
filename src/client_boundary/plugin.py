import logging
from pathlib import Path

from client_boundary.core.config import find_project_root
from client_boundary.core.emitter import BoundaryEmitter, GeneratedFileRegistry
from client_boundary.core.languages import is_project_source
from client_boundary.core.ports.store import VirtualModuleStore
from client_boundary.core.transform import transform_source
from client_boundary.store import InMemoryModuleStore

logger = logging.getLogger(__name__)


class ClientBoundaryPlugin:
    """One build session: a registry of generated boundaries and the store they go to.

    Hosts call ``should_transform`` to scope the transform to project files and
    ``transform`` for each file before normal compilation.
    """

    def __init__(self, store: VirtualModuleStore | None = None, project_root: Path | None = None) -> None:
        self.store: VirtualModuleStore = store if store is not None else InMemoryModuleStore()
        self.registry = GeneratedFileRegistry()
        self.emitter = BoundaryEmitter(self.store, self.registry)
        self.project_root = project_root.absolute() if project_root is not None else find_project_root()
        logger.info("Client boundary plugin ready (project root: %s)", self.project_root)

    def should_transform(self, path: str | Path) -> bool:
        return is_project_source(Path(path))

    def transform(self, path: str | Path, source: str) -> str:
        return transform_source(path, source, self.emitter, self.project_root)
