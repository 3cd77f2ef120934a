#!/usr/bin/env python3
"""
Async DEM Tiles MCP Server using chuk-mcp-server

Elevation tile acquisition and caching. Serves SRTM tiles from the local
cache, downloading missing tile archives over HTTP or FTP on demand.
"""

import logging

from chuk_mcp_server import ChukMCPServer

from .core.tile_manager import TileManager
from .tools.discovery import register_discovery_tools
from .tools.tiles import register_tile_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-dem-tiles")

# Create tile manager instance
manager = TileManager()

# Register all tool modules
register_discovery_tools(mcp, manager)
register_tile_tools(mcp, manager)

# Run the server
if __name__ == "__main__":
    logger.info("Starting DEM Tiles MCP Server...")
    logger.info(f"Tile cache: {manager.cache_dir}")
    mcp.run(stdio=True)
