"""
Raster I/O operations for elevation tiles.

All functions are synchronous — callers wrap them in asyncio.to_thread().
Handles reading a tile from a local file or from in-memory archive entry
bytes, and point sampling on the decoded array.
"""

import logging
import math
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

# Type aliases
FloatArray = NDArray[np.floating[Any]]
Transform = Any  # rasterio.Affine


# ---------------------------------------------------------------------------
# Tile reading
# ---------------------------------------------------------------------------


def read_tile_file(path: Path) -> tuple[FloatArray, Any, Transform, float | None]:
    """
    Read band 1 of a local tile file.

    Args:
        path: GeoTIFF, HGT, or any other GDAL-readable raster

    Returns:
        Tuple of (elevation_array, CRS, transform, nodata)
    """
    import rasterio

    with rasterio.open(path) as src:
        return _read_band(src)


def read_tile_bytes(
    data: bytes,
    filename: str,
) -> tuple[FloatArray, Any, Transform, float | None]:
    """
    Read band 1 of a tile held in memory (e.g. extracted from a zip archive).

    Args:
        data: Raw file content
        filename: Original entry name; GDAL uses its extension to pick a driver

    Returns:
        Tuple of (elevation_array, CRS, transform, nodata)
    """
    from rasterio.io import MemoryFile

    with MemoryFile(data, filename=filename) as memfile:
        with memfile.open() as src:
            return _read_band(src)


def _read_band(src: Any) -> tuple[FloatArray, Any, Transform, float | None]:
    elevation = src.read(1).astype(np.float32)
    nodata = src.nodata

    # Replace nodata with NaN
    if nodata is not None:
        elevation[elevation == nodata] = np.nan

    return elevation, src.crs, src.transform, nodata


# ---------------------------------------------------------------------------
# Point sampling
# ---------------------------------------------------------------------------


def sample_elevation(
    elevation: FloatArray,
    transform: Transform,
    lon: float,
    lat: float,
    interpolation: str = "bilinear",
) -> float:
    """
    Sample elevation at a single point.

    Args:
        elevation: 2D elevation array
        transform: Affine transform
        lon: Longitude
        lat: Latitude
        interpolation: nearest or bilinear

    Returns:
        Elevation value in metres
    """
    col_f, row_f = ~transform * (lon, lat)

    if interpolation == "nearest":
        row, col = int(math.floor(row_f)), int(math.floor(col_f))
        if 0 <= row < elevation.shape[0] and 0 <= col < elevation.shape[1]:
            val = elevation[row, col]
            return float(val) if not np.isnan(val) else float("nan")
        return float("nan")

    elif interpolation == "bilinear":
        # Pixel centres sit at half-integer offsets from the transform origin
        return _bilinear_sample(elevation, row_f - 0.5, col_f - 0.5)

    else:
        raise ValueError(f"Unknown interpolation: {interpolation}")


def _bilinear_sample(array: FloatArray, row_f: float, col_f: float) -> float:
    """Bilinear interpolation at fractional pixel coordinates."""
    r0, c0 = int(math.floor(row_f)), int(math.floor(col_f))
    r1, c1 = r0 + 1, c0 + 1
    h, w = array.shape

    if r0 < 0 or c0 < 0 or r1 >= h or c1 >= w:
        return float("nan")

    dr = row_f - r0
    dc = col_f - c0

    v00 = array[r0, c0]
    v01 = array[r0, c1]
    v10 = array[r1, c0]
    v11 = array[r1, c1]

    if any(np.isnan(v) for v in [v00, v01, v10, v11]):
        return float("nan")

    val = v00 * (1 - dr) * (1 - dc) + v01 * (1 - dr) * dc + v10 * dr * (1 - dc) + v11 * dr * dc
    return float(val)
