from client_boundary.store.disk import DiskModuleStore
from client_boundary.store.memory import InMemoryModuleStore

__all__ = [
    "DiskModuleStore",
    "InMemoryModuleStore",
]
