"""
Discovery tools — tile source listing, description, status.

These tools require no network I/O and return information about
available tile sources and the local tile cache.
"""

import logging

from ...constants import (
    ALL_SOURCE_IDS,
    DEFAULT_SOURCE,
    ServerConfig,
    SuccessMessages,
)
from ...models.responses import (
    ErrorResponse,
    SourceDetailResponse,
    SourceInfo,
    SourcesResponse,
    StatusResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_discovery_tools(mcp, manager):
    """Register discovery tools with the MCP server."""

    @mcp.tool()
    async def dem_list_sources(output_mode: str = "json") -> str:
        """List all elevation tile sources with protocol, resolution, and coverage.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            List of available tile sources with metadata
        """
        try:
            sources = [SourceInfo(**s) for s in manager.list_sources()]
            response = SourcesResponse(
                sources=sources,
                default=manager.default_source,
                message=SuccessMessages.SOURCES_LIST.format(len(sources)),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_list_sources failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_describe_source(source: str = DEFAULT_SOURCE, output_mode: str = "json") -> str:
        """Get detailed metadata for a tile source including its remote location.

        Args:
            source: Tile source ID (srtm3, srtm3_ftp, srtm1)
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Detailed source metadata
        """
        try:
            data = manager.describe_source(source)
            response = SourceDetailResponse(
                **data,
                message=SuccessMessages.SOURCE_DESCRIBE.format(
                    data["name"], data["resolution_m"], data["coverage"]
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_describe_source failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_status(output_mode: str = "json") -> str:
        """Get server status including cache location, tracked tiles, and offline sources.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Server status information
        """
        try:
            response = StatusResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                default_source=manager.default_source,
                available_sources=ALL_SOURCE_IDS,
                cache_dir=str(manager.cache_dir),
                tracked_tiles=manager.tracked_tiles,
                tile_states=manager.state_counts(),
                offline_sources=manager.offline_sources,
                message=SuccessMessages.STATUS.format(
                    ServerConfig.NAME,
                    ServerConfig.VERSION,
                    len(ALL_SOURCE_IDS),
                    manager.tracked_tiles,
                ),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_status failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
