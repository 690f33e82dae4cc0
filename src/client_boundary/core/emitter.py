import logging
import threading
from pathlib import Path

from client_boundary.core.config import GENERATED_DIR
from client_boundary.core.ports.store import VirtualModuleStore
from client_boundary.models import BoundaryModule

logger = logging.getLogger(__name__)


def boundary_path(project_root: Path, boundary_id: str) -> Path:
    return project_root / GENERATED_DIR / f"{boundary_id}.js"


class GeneratedFileRegistry:
    """Last written content per boundary path, for the lifetime of one build session.

    The check-then-write for a path runs under that path's own lock; writes to
    different paths never wait on each other.
    """

    def __init__(self) -> None:
        self._contents: dict[Path, str] = {}
        self._locks: dict[Path, threading.Lock] = {}
        self._guard = threading.Lock()

    def __contains__(self, path: object) -> bool:
        return path in self._contents

    def __len__(self) -> int:
        return len(self._contents)

    def get(self, path: Path) -> str | None:
        return self._contents.get(path)

    def paths(self) -> list[Path]:
        return sorted(self._contents)

    def _lock_for(self, path: Path) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(path)
            if lock is None:
                lock = self._locks[path] = threading.Lock()
            return lock

    def write_if_changed(self, store: VirtualModuleStore, path: Path, content: str) -> bool:
        with self._lock_for(path):
            if self._contents.get(path) == content:
                return False
            store.write_module(path, content)
            self._contents[path] = content
        return True


class BoundaryEmitter:
    def __init__(self, store: VirtualModuleStore, registry: GeneratedFileRegistry | None = None) -> None:
        self.store = store
        self.registry = registry if registry is not None else GeneratedFileRegistry()

    def write_if_changed(self, path: Path, content: str) -> bool:
        return self.registry.write_if_changed(self.store, path, content)

    def emit(self, boundary: BoundaryModule) -> bool:
        written = self.write_if_changed(boundary.path, boundary.content)
        if written:
            logger.info("Wrote boundary module %s", boundary.path)
        else:
            logger.debug("Boundary module %s unchanged", boundary.path)
        return written
