import typer
from rich.console import Console

console = Console(stderr=True)


def mcp(
    transport: str = "stdio",
) -> None:
    """Start the MCP server."""
    from client_boundary.mcp.server import create_mcp_server
    from client_boundary.session import BoundarySession

    server = create_mcp_server(BoundarySession())
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
