"""
Tests for tile tools (dem_get_tile, dem_tile_info, dem_point_elevation,
dem_release_tiles).

Tests cover:
- Success paths (JSON and text output modes)
- Parameter forwarding to manager methods
- Absent tiles reported as unavailable, not as errors
- Error handling (exception -> ErrorResponse)
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from chuk_mcp_dem_tiles.core.errors import TileAcquisitionError
from chuk_mcp_dem_tiles.core.tile_manager import PointResult, TileResult


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tile_tools(mock_manager):
    """Register tile tools and return (tools_dict, manager)."""
    tools = {}
    mcp = MagicMock()

    def capture_tool(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn

        return decorator

    mcp.tool = capture_tool

    from chuk_mcp_dem_tiles.tools.tiles.api import register_tile_tools

    register_tile_tools(mcp, mock_manager)
    return tools, mock_manager


def _tile_result(state="ready", available=True, message=""):
    return TileResult(
        source="srtm3",
        tile_name="srtm_38_03.tif",
        state=state,
        available=available,
        shape=[6000, 6000] if available else [0, 0],
        elevation_range=[193.0, 4634.0] if available else [0.0, 0.0],
        local_path="/cache/srtm3/srtm_38_03.tif",
        archive_path="/cache/srtm3/srtm_38_03.zip",
        remote_enabled=True,
        message=message,
    )


class TestRegistration:
    def test_all_tools_registered(self, tile_tools):
        tools, _ = tile_tools
        assert set(tools) == {
            "dem_get_tile",
            "dem_tile_info",
            "dem_point_elevation",
            "dem_release_tiles",
        }


class TestDemGetTile:
    @pytest.mark.asyncio
    async def test_ready(self, tile_tools):
        tools, manager = tile_tools
        manager.get_tile = AsyncMock(return_value=_tile_result())

        result = json.loads(await tools["dem_get_tile"](lon=7.5, lat=46.5))

        assert result["available"] is True
        assert result["shape"] == [6000, 6000]
        assert result["message"] == "Tile srtm_38_03.tif ready (6000x6000)"
        manager.get_tile.assert_awaited_once_with(lon=7.5, lat=46.5, source=None)

    @pytest.mark.asyncio
    async def test_source_forwarded(self, tile_tools):
        tools, manager = tile_tools
        manager.get_tile = AsyncMock(return_value=_tile_result())
        await tools["dem_get_tile"](lon=7.5, lat=46.5, source="srtm3_ftp")
        assert manager.get_tile.call_args.kwargs["source"] == "srtm3_ftp"

    @pytest.mark.asyncio
    async def test_absent_is_not_an_error(self, tile_tools):
        tools, manager = tile_tools
        manager.get_tile = AsyncMock(return_value=_tile_result("absent", False, "ocean"))

        result = json.loads(await tools["dem_get_tile"](lon=-30.0, lat=0.0))

        assert "error" not in result
        assert result["available"] is False
        assert "not available" in result["message"]

    @pytest.mark.asyncio
    async def test_pending(self, tile_tools):
        tools, manager = tile_tools
        manager.get_tile = AsyncMock(
            return_value=_tile_result("remote", False, "Failed to connect to FTP host: 530")
        )
        result = json.loads(await tools["dem_get_tile"](lon=7.5, lat=46.5))
        assert "could not be acquired right now" in result["message"]
        assert "530" in result["message"]

    @pytest.mark.asyncio
    async def test_unrecoverable_is_error(self, tile_tools):
        tools, manager = tile_tools
        manager.get_tile = AsyncMock(
            side_effect=TileAcquisitionError("srtm_38_03.tif", "remote source unreachable")
        )
        result = json.loads(await tools["dem_get_tile"](lon=7.5, lat=46.5))
        assert "unreachable" in result["error"]

    @pytest.mark.asyncio
    async def test_text(self, tile_tools):
        tools, manager = tile_tools
        manager.get_tile = AsyncMock(return_value=_tile_result())
        text = await tools["dem_get_tile"](lon=7.5, lat=46.5, output_mode="text")
        assert "State: ready" in text
        assert "Shape: 6000x6000" in text

    @pytest.mark.asyncio
    async def test_end_to_end_with_manager(self, tile_tools):
        tools, _ = tile_tools
        # Fake fetcher writes nothing, so the fetched archive is missing at decode time
        result = json.loads(await tools["dem_get_tile"](lon=7.5, lat=46.5))
        assert result["tile_name"] == "srtm_38_03.tif"
        assert result["state"] == "local_error"
        assert result["available"] is False


class TestDemTileInfo:
    @pytest.mark.asyncio
    async def test_info(self, tile_tools):
        tools, _ = tile_tools
        result = json.loads(await tools["dem_tile_info"](lon=7.5, lat=46.5, source="srtm1"))
        assert result["tile_name"] == "N46E007.hgt"
        assert result["state"] == "unknown"
        assert result["message"] == "Tile N46E007.hgt is unknown"
        assert result["archive_path"].endswith("N46E007.SRTMGL1.hgt.zip")

    @pytest.mark.asyncio
    async def test_outside_coverage(self, tile_tools):
        tools, _ = tile_tools
        result = json.loads(await tools["dem_tile_info"](lon=0.0, lat=80.0))
        assert "does not cover" in result["error"]


class TestDemPointElevation:
    @pytest.mark.asyncio
    async def test_elevation(self, tile_tools):
        tools, manager = tile_tools
        manager.get_elevation = AsyncMock(
            return_value=PointResult(
                source="srtm3", tile_name="srtm_38_03.tif", elevation_m=1234.56, available=True
            )
        )

        result = json.loads(await tools["dem_point_elevation"](lon=7.5, lat=46.5))

        assert result["elevation_m"] == pytest.approx(1234.56)
        assert result["interpolation"] == "bilinear"
        assert result["message"] == "Elevation at point: 1234.6m"

    @pytest.mark.asyncio
    async def test_no_data(self, tile_tools):
        tools, manager = tile_tools
        manager.get_elevation = AsyncMock(
            return_value=PointResult(
                source="srtm3",
                tile_name="srtm_32_12.tif",
                elevation_m=float("nan"),
                available=False,
            )
        )

        result = json.loads(await tools["dem_point_elevation"](lon=-30.0, lat=0.0))

        assert result["elevation_m"] is None
        assert result["available"] is False

    @pytest.mark.asyncio
    async def test_invalid_interpolation(self, tile_tools):
        tools, manager = tile_tools
        manager.get_elevation = AsyncMock()
        result = json.loads(
            await tools["dem_point_elevation"](lon=7.5, lat=46.5, interpolation="cubic")
        )
        assert "Invalid interpolation" in result["error"]
        manager.get_elevation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_text(self, tile_tools):
        tools, manager = tile_tools
        manager.get_elevation = AsyncMock(
            return_value=PointResult(
                source="srtm3", tile_name="srtm_38_03.tif", elevation_m=500.0, available=True
            )
        )
        text = await tools["dem_point_elevation"](
            lon=7.5, lat=46.5, interpolation="nearest", output_mode="text"
        )
        assert "500.0m" in text
        assert "nearest" in text


class TestDemReleaseTiles:
    @pytest.mark.asyncio
    async def test_release_all(self, tile_tools):
        tools, manager = tile_tools
        manager.get_descriptor("srtm3", 7.5, 46.5)
        manager.get_descriptor("srtm1", 7.5, 46.5)

        result = json.loads(await tools["dem_release_tiles"]())

        assert result["released"] == 2
        assert result["source"] is None
        assert manager.tracked_tiles == 0

    @pytest.mark.asyncio
    async def test_release_one_source(self, tile_tools):
        tools, manager = tile_tools
        manager.get_descriptor("srtm3", 7.5, 46.5)
        manager.get_descriptor("srtm1", 7.5, 46.5)

        result = json.loads(await tools["dem_release_tiles"](source="srtm1"))

        assert result["released"] == 1
        assert result["message"] == "Released 1 tile descriptors"

    @pytest.mark.asyncio
    async def test_error(self, tile_tools):
        tools, manager = tile_tools
        manager.release = MagicMock(side_effect=RuntimeError("busy"))
        result = json.loads(await tools["dem_release_tiles"]())
        assert result == {"error": "busy"}
