"""
Tests for discovery tools (dem_list_sources, dem_describe_source, dem_status).

Tests cover:
- JSON and text output modes
- Manager state surfaced in status
- Error handling (exception -> ErrorResponse)
"""

import json

import pytest
from unittest.mock import MagicMock

from chuk_mcp_dem_tiles.core.errors import TileAcquisitionError
from chuk_mcp_dem_tiles.core.outcome import FetchOutcome
from chuk_mcp_dem_tiles.core.tile_manager import TileManager

from conftest import FakeDecoder, FakeFetcher


@pytest.fixture
def discovery_tools(mock_manager):
    """Register discovery tools and return (tools_dict, manager)."""
    tools = {}
    mcp = MagicMock()

    def capture_tool(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn

        return decorator

    mcp.tool = capture_tool

    from chuk_mcp_dem_tiles.tools.discovery.api import register_discovery_tools

    register_discovery_tools(mcp, mock_manager)
    return tools, mock_manager


class TestRegistration:
    def test_all_tools_registered(self, discovery_tools):
        tools, _ = discovery_tools
        assert set(tools) == {"dem_list_sources", "dem_describe_source", "dem_status"}


class TestDemListSources:
    @pytest.mark.asyncio
    async def test_json(self, discovery_tools):
        tools, _ = discovery_tools
        result = json.loads(await tools["dem_list_sources"]())
        assert [s["id"] for s in result["sources"]] == ["srtm3", "srtm3_ftp", "srtm1"]
        assert result["default"] == "srtm3"
        assert result["message"] == "3 tile sources available"

    @pytest.mark.asyncio
    async def test_text(self, discovery_tools):
        tools, _ = discovery_tools
        text = await tools["dem_list_sources"](output_mode="text")
        assert "srtm3_ftp" in text
        assert "via ftp" in text

    @pytest.mark.asyncio
    async def test_error(self, discovery_tools):
        tools, manager = discovery_tools
        manager.list_sources = MagicMock(side_effect=RuntimeError("boom"))
        result = json.loads(await tools["dem_list_sources"]())
        assert result == {"error": "boom"}


class TestDemDescribeSource:
    @pytest.mark.asyncio
    async def test_default_source(self, discovery_tools):
        tools, _ = discovery_tools
        result = json.loads(await tools["dem_describe_source"]())
        assert result["id"] == "srtm3"
        assert result["protocol"] == "http"
        assert result["file_extension"] == ".tif"
        assert result["offline"] is False

    @pytest.mark.asyncio
    async def test_ftp_source(self, discovery_tools):
        tools, _ = discovery_tools
        result = json.loads(await tools["dem_describe_source"](source="srtm3_ftp"))
        assert result["remote_location"].startswith("ftp://")

    @pytest.mark.asyncio
    async def test_text(self, discovery_tools):
        tools, _ = discovery_tools
        text = await tools["dem_describe_source"](source="srtm1", output_mode="text")
        assert "SRTM 1Sec HGT (srtm1)" in text
        assert "Resolution: 30m" in text

    @pytest.mark.asyncio
    async def test_unknown_source(self, discovery_tools):
        tools, _ = discovery_tools
        result = json.loads(await tools["dem_describe_source"](source="bogus"))
        assert "Unknown tile source" in result["error"]


class TestDemStatus:
    @pytest.mark.asyncio
    async def test_fresh_manager(self, discovery_tools):
        tools, manager = discovery_tools
        result = json.loads(await tools["dem_status"]())
        assert result["server"] == "chuk-mcp-dem-tiles"
        assert result["tracked_tiles"] == 0
        assert result["tile_states"] == {}
        assert result["offline_sources"] == []
        assert result["cache_dir"] == str(manager.cache_dir)

    @pytest.mark.asyncio
    async def test_reports_offline_source(self, tmp_path):
        manager = TileManager(
            cache_dir=tmp_path,
            decoder=FakeDecoder(),
            fetcher_factory=lambda src: FakeFetcher(outcomes=[FetchOutcome.fatal("down")]),
        )
        tools = {}
        mcp = MagicMock()
        mcp.tool = lambda **kw: (lambda fn: tools.setdefault(fn.__name__, fn))

        from chuk_mcp_dem_tiles.tools.discovery.api import register_discovery_tools

        register_discovery_tools(mcp, manager)
        with pytest.raises(TileAcquisitionError):
            await manager.get_tile(7.5, 46.5, source="srtm3_ftp")

        result = json.loads(await tools["dem_status"]())
        assert result["offline_sources"] == ["srtm3_ftp"]
        assert result["tile_states"] == {"fatal": 1}

    @pytest.mark.asyncio
    async def test_text(self, discovery_tools):
        tools, _ = discovery_tools
        text = await tools["dem_status"](output_mode="text")
        assert text.startswith("chuk-mcp-dem-tiles v")
        assert "Tracked tiles: 0" in text
