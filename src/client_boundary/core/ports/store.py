from pathlib import Path
from typing import Protocol


class VirtualModuleStore(Protocol):
    def write_module(self, path: Path, content: str) -> None: ...
