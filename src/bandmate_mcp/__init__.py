"""
Bandmate MCP Server

Exposes the Bandmate songs/lists/artists REST API as MCP tools over
Streamable HTTP (/mcp) and legacy SSE (/sse + /messages).
"""

__version__ = "1.0.0"
