"""
Rehome - atomic fully-qualified type renames for Java/Kotlin source trees.

Finds every import, qualified usage and import-bound simple-name usage of a
type, rewrites them, and moves the declaring file to its new package
directory. All edits for one rename commit together or not at all.
"""

__version__ = "0.1.0"

# Keep this import-light: the MCP entry point lives in server.py and pulls in
# fastmcp only when it is actually started.

__all__ = ["__version__"]
