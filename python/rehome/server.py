"""
Rehome MCP Server - FastMCP implementation

Exposes the FQN rename engine as an MCP tool.

CRITICAL: This is an MCP server - NEVER use print() statements!
stdout is reserved for JSON-RPC protocol. Use logger instead.
"""

from fastmcp import FastMCP

from rehome import __version__
from rehome.logging_config import setup_logging
from rehome.stdio_hardening import handle_broken_pipe, harden_stdio
from rehome.tools import rename_fqn

# Initialize logging FIRST (before any other operations)
logger = setup_logging()
logger.info(f"Starting rehome MCP server {__version__} initialization...")

_instructions = (
    "Use rename_fqn to move or rename a Java/Kotlin type. Always preview with "
    "dry_run=True first, then apply with dry_run=False."
)

mcp = FastMCP("Rehome FQN Rename Server", instructions=_instructions)

# output_schema=None disables structured content wrapping (avoids {"result": ...} for strings)
mcp.tool(output_schema=None)(rename_fqn)  # Returns text/JSON/TOON (default: text)

__all__ = ["mcp", "rename_fqn", "main"]


@handle_broken_pipe
def main():
    """
    Main entry point for the rehome MCP server (stdio transport).

    Stdio is hardened first so the JSON-RPC stream stays clean UTF-8.
    """
    harden_stdio()

    logger.info("🚀 Starting rehome MCP server...")

    # Suppress FastMCP banner to keep stdout clean for MCP protocol
    mcp.run(show_banner=False)


if __name__ == "__main__":
    main()
