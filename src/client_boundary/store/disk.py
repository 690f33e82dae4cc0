import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class DiskModuleStore:
    """Writes boundary modules to the real filesystem, creating parent directories."""

    def write_module(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %d bytes to %s", len(content), path)
