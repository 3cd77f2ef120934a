#!/usr/bin/env python3
"""
Tile Cache Demo -- chuk-mcp-dem-tiles

Downloads the SRTM tile around the Matterhorn into a local cache, samples a
few elevations from it, then shows that the second request is served from
the cache. A point over the Atlantic demonstrates a tile that does not exist.

Requires network access.

Usage:
    python examples/tile_cache_demo.py [cache_dir] [source]
"""

import asyncio
import sys
import time

from tool_runner import ToolRunner

POINTS = {
    "Matterhorn summit": (7.6586, 45.9763),
    "Zermatt": (7.7491, 46.0207),
    "Gornergrat": (7.7843, 45.9837),
}


async def main() -> None:
    cache_dir = sys.argv[1] if len(sys.argv) > 1 else None
    source = sys.argv[2] if len(sys.argv) > 2 else "srtm1"
    runner = ToolRunner(cache_dir=cache_dir)

    print("=" * 60)
    print(f"chuk-mcp-dem-tiles -- Tile Cache ({source})")
    print("=" * 60)

    lon, lat = POINTS["Matterhorn summit"]
    print(await runner.run_text("dem_tile_info", lon=lon, lat=lat, source=source))

    start = time.perf_counter()
    tile = await runner.run("dem_get_tile", lon=lon, lat=lat, source=source)
    elapsed = time.perf_counter() - start
    if "error" in tile:
        print(f"\nFailed: {tile['error']}")
        return
    print(f"\n{tile['message']} in {elapsed:.1f}s")
    print(f"  Local: {tile['local_path']}")
    print(f"  Archive: {tile['archive_path']}")

    print("\nElevations:")
    for place, (plon, plat) in POINTS.items():
        for method in ("nearest", "bilinear"):
            result = await runner.run(
                "dem_point_elevation", lon=plon, lat=plat, source=source, interpolation=method
            )
            value = result.get("elevation_m")
            shown = f"{value:7.1f}m" if value is not None else "   no data"
            print(f"  {place:18s} {method:8s} {shown}")

    # Release and re-acquire: served from the local archive this time
    await runner.run("dem_release_tiles")
    start = time.perf_counter()
    tile = await runner.run("dem_get_tile", lon=lon, lat=lat, source=source)
    print(f"\nFrom cache: {tile['message']} in {time.perf_counter() - start:.2f}s")

    ocean = await runner.run("dem_get_tile", lon=-30.0, lat=0.0, source=source)
    print(f"\nOpen ocean: {ocean.get('message', ocean.get('error'))}")

    print()
    print(await runner.run_text("dem_status"))


if __name__ == "__main__":
    asyncio.run(main())
