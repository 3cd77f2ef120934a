"""
chuk-mcp-dem-tiles: Elevation Tile Acquisition & Caching MCP Server

Returns decoded SRTM elevation tiles on demand, reading them from the local
cache, from a cached zip archive, or downloading them over HTTP or FTP.
Distinguishes tiles that legitimately do not exist (open ocean) from
remotes that cannot be reached.
"""
