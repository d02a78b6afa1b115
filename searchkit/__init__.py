"""
searchkit: filesystem pattern matching and content search for AI agents.

Three tools are exposed through a uniform interface, a registry, an MCP
server, an HTTP API and a CLI:

    glob     Find files by glob pattern (recursive ** supported)
    grep     Line-oriented regex search with captures and statistics
    search   Regex content search with context lines and filters
"""

__version__ = "0.1.0"
