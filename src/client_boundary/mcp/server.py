"""FastMCP server exposing client-boundary tools."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from client_boundary.core.errors import ClientBoundaryError
from client_boundary.session import BoundarySession


def create_mcp_server(session: BoundarySession) -> FastMCP:
    """Create a FastMCP server bound to one build session."""

    mcp = FastMCP(
        "client-boundary",
        instructions="Rewrite `use: 'client'` imports into boundary modules and check props crossing them.",
    )

    @mcp.tool()
    async def check_file(path: str) -> list[dict[str, Any]]:
        """List non-serializable props passed to client components in a file."""
        return [diagnostic.model_dump(mode="json") for diagnostic in session.check_file(Path(path))]

    @mcp.tool()
    async def transform_file(path: str) -> str:
        """Return the file's source with client imports rewritten to boundary modules."""
        try:
            return session.transform_file(Path(path))
        except (ClientBoundaryError, OSError, UnicodeDecodeError) as exc:
            return f"Error: {exc}"

    return mcp
