from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class InMemoryModuleStore:
    """Virtual modules kept in memory; ``writes`` records every write in order."""

    modules: dict[Path, str] = field(default_factory=dict)
    writes: list[Path] = field(default_factory=list)

    def write_module(self, path: Path, content: str) -> None:
        self.modules[path] = content
        self.writes.append(path)

    def read_module(self, path: Path) -> str | None:
        return self.modules.get(path)
