"""
Product decoders — turn a local tile file or archive entry into an ElevationTile.

A decoder returns None when the input holds no usable elevation product
(e.g. a tile that is entirely nodata over open ocean). Any exception it
raises is treated by the TileDescriptor as an I/O failure.
"""

import logging
from pathlib import Path
from typing import Protocol

import numpy as np

from . import raster_io
from .tile import ElevationTile

logger = logging.getLogger(__name__)


class TileDecoder(Protocol):
    def decode_file(self, path: Path, tile_name: str) -> ElevationTile | None: ...

    def decode_bytes(self, data: bytes, tile_name: str) -> ElevationTile | None: ...


class RasterioTileDecoder:
    """Decode GDAL-readable tiles (GeoTIFF, SRTM HGT) with rasterio."""

    def decode_file(self, path: Path, tile_name: str) -> ElevationTile | None:
        elevation, crs, transform, nodata = raster_io.read_tile_file(path)
        return self._make_tile(tile_name, elevation, crs, transform, nodata)

    def decode_bytes(self, data: bytes, tile_name: str) -> ElevationTile | None:
        elevation, crs, transform, nodata = raster_io.read_tile_bytes(data, tile_name)
        return self._make_tile(tile_name, elevation, crs, transform, nodata)

    def _make_tile(self, tile_name, elevation, crs, transform, nodata) -> ElevationTile | None:
        if elevation.size == 0 or np.all(np.isnan(elevation)):
            logger.info(f"Tile {tile_name} holds no elevation data")
            return None
        return ElevationTile(
            name=tile_name,
            data=elevation,
            transform=transform,
            crs=crs,
            nodata=nodata,
        )
