#!/usr/bin/env python3
"""
Capabilities Demo -- chuk-mcp-dem-tiles

Quick-start script showing what the server can do, without any network
access. Lists tile sources, shows which tile covers a few landmarks, and
prints server status in both output modes.

Usage:
    python examples/capabilities_demo.py
"""

import asyncio
import tempfile

from tool_runner import ToolRunner

LANDMARKS = {
    "Matterhorn": (7.6586, 45.9763),
    "Aconcagua": (-70.0109, -32.6532),
    "Mid-Atlantic": (-30.0, 0.0),
}


async def main() -> None:
    with tempfile.TemporaryDirectory() as cache_dir:
        runner = ToolRunner(cache_dir=cache_dir)

        print("=" * 60)
        print("chuk-mcp-dem-tiles -- Server Capabilities")
        print("=" * 60)

        print(f"\nRegistered tools ({len(runner.tool_names)}):")
        for name in sorted(runner.tool_names):
            print(f"  - {name}")

        sources = await runner.run("dem_list_sources")
        print(f"\nTile sources ({len(sources['sources'])}):")
        print(f"  Default: {sources['default']}")
        for s in sources["sources"]:
            print(
                f"  {s['id']:10s}  {s['name']:32s}  {s['resolution_m']:3d}m  "
                f"{s['tile_size_degrees']:g} deg  {s['protocol']}"
            )

        for source_id in ("srtm3_ftp", "srtm1"):
            detail = await runner.run("dem_describe_source", source=source_id)
            print(f"\n{detail['name']}")
            print(f"  Remote: {detail['remote_location']}")
            print(f"  License: {detail['license']}")

        # Which tile covers each landmark (no I/O)
        print("\nTile lookup:")
        for place, (lon, lat) in LANDMARKS.items():
            for source_id in ("srtm3", "srtm1"):
                info = await runner.run("dem_tile_info", lon=lon, lat=lat, source=source_id)
                print(f"  {place:13s} {source_id:6s} -> {info['tile_name']} ({info['state']})")

        print("\nServer status (text mode):")
        print(await runner.run_text("dem_status"))


if __name__ == "__main__":
    asyncio.run(main())
