"""MCP tool registration for chuk-mcp-dem-tiles."""
