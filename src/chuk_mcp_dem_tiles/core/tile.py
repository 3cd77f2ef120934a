"""
Decoded elevation tile.

An ElevationTile owns the elevation array read from a tile file together
with its georeferencing. It is created by a decoder and exclusively owned by
the TileDescriptor that cached it.
"""

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from .raster_io import FloatArray, Transform, sample_elevation

logger = logging.getLogger(__name__)


@dataclass
class ElevationTile:
    """Elevation samples for one tile."""

    name: str
    data: FloatArray | None
    transform: Transform
    crs: Any
    nodata: float | None = None

    @property
    def disposed(self) -> bool:
        return self.data is None

    @property
    def shape(self) -> list[int]:
        if self.data is None:
            return [0, 0]
        return list(self.data.shape)

    @property
    def elevation_range(self) -> list[float]:
        if self.data is None:
            return [0.0, 0.0]
        valid = self.data[~np.isnan(self.data)]
        if len(valid) == 0:
            return [0.0, 0.0]
        return [float(np.min(valid)), float(np.max(valid))]

    def sample(self, lon: float, lat: float, interpolation: str = "bilinear") -> float:
        """Elevation in metres at a geographic point, NaN outside the tile or on voids."""
        data = self.data
        if data is None:
            raise RuntimeError(f"Tile {self.name} has been disposed")
        return sample_elevation(data, self.transform, lon, lat, interpolation)

    def dispose(self) -> None:
        """Release the elevation array."""
        if self.data is not None:
            logger.debug(f"Disposing tile {self.name}")
        self.data = None
