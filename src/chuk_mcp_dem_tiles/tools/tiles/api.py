"""
Tile tools — tile acquisition, tile info, point elevation, release.

dem_get_tile and dem_point_elevation may perform network I/O to download
a tile archive into the local cache. dem_tile_info never does.
"""

import logging
import math

from ...constants import (
    DEFAULT_INTERPOLATION,
    INTERPOLATION_METHODS,
    ErrorMessages,
    SuccessMessages,
)
from ...models.responses import (
    ErrorResponse,
    PointElevationResponse,
    ReleaseResponse,
    TileResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def _tile_message(result) -> str:
    if result.available:
        return SuccessMessages.TILE_READY.format(result.tile_name, *result.shape)
    if result.state == "absent":
        return SuccessMessages.TILE_ABSENT.format(result.tile_name)
    return SuccessMessages.TILE_PENDING.format(result.tile_name, result.message or result.state)


def _tile_response(result, lon: float, lat: float, message: str) -> TileResponse:
    return TileResponse(
        source=result.source,
        lon=lon,
        lat=lat,
        tile_name=result.tile_name,
        state=result.state,
        available=result.available,
        shape=result.shape,
        elevation_range=result.elevation_range,
        local_path=result.local_path,
        archive_path=result.archive_path,
        remote_enabled=result.remote_enabled,
        message=message,
    )


def register_tile_tools(mcp, manager):
    """Register tile tools with the MCP server."""

    @mcp.tool()
    async def dem_get_tile(
        lon: float,
        lat: float,
        source: str | None = None,
        output_mode: str = "json",
    ) -> str:
        """Acquire the elevation tile covering a point, downloading it if needed.

        Tiles over open ocean legitimately do not exist and are reported as
        unavailable rather than as an error.

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            source: Tile source (srtm3, srtm3_ftp, srtm1); defaults to server default
            output_mode: "json" or "text"

        Returns:
            Tile state, dimensions, and elevation range
        """
        try:
            result = await manager.get_tile(lon=lon, lat=lat, source=source)
            response = _tile_response(result, lon, lat, _tile_message(result))
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_get_tile failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_tile_info(
        lon: float,
        lat: float,
        source: str | None = None,
        output_mode: str = "json",
    ) -> str:
        """Show which tile covers a point and its cache state, without any I/O.

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            source: Tile source (srtm3, srtm3_ftp, srtm1); defaults to server default
            output_mode: "json" or "text"

        Returns:
            Tile name, local paths, and state
        """
        try:
            result = manager.tile_status(lon=lon, lat=lat, source=source)
            response = _tile_response(
                result, lon, lat, SuccessMessages.TILE_INFO.format(result.tile_name, result.state)
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_tile_info failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_point_elevation(
        lon: float,
        lat: float,
        source: str | None = None,
        interpolation: str = DEFAULT_INTERPOLATION,
        output_mode: str = "json",
    ) -> str:
        """Get elevation at a single geographic point.

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            source: Tile source (srtm3, srtm3_ftp, srtm1); defaults to server default
            interpolation: Sampling method (nearest, bilinear)
            output_mode: "json" or "text"

        Returns:
            Elevation in metres, or no data if the tile is unavailable
        """
        try:
            if interpolation not in INTERPOLATION_METHODS:
                raise ValueError(
                    ErrorMessages.INVALID_INTERPOLATION.format(
                        interpolation, ", ".join(INTERPOLATION_METHODS)
                    )
                )

            result = await manager.get_elevation(
                lon=lon,
                lat=lat,
                source=source,
                interpolation=interpolation,
            )

            if result.available and not math.isnan(result.elevation_m):
                elevation = result.elevation_m
                message = SuccessMessages.POINT_ELEVATION.format(elevation)
            else:
                elevation = None
                message = SuccessMessages.POINT_NO_DATA.format(lon, lat)

            response = PointElevationResponse(
                source=result.source,
                lon=lon,
                lat=lat,
                tile_name=result.tile_name,
                elevation_m=elevation,
                interpolation=interpolation,
                available=elevation is not None,
                message=message,
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_point_elevation failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def dem_release_tiles(source: str | None = None, output_mode: str = "json") -> str:
        """Release cached tiles and close remote sessions.

        Args:
            source: Only release tiles of this source; all sources if omitted
            output_mode: "json" or "text"

        Returns:
            Number of tile descriptors released
        """
        try:
            released = manager.release(source)
            response = ReleaseResponse(
                source=source,
                released=released,
                message=SuccessMessages.RELEASED.format(released),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"dem_release_tiles failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
