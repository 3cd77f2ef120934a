"""
Tile Manager — central orchestrator for elevation tile acquisition.

Maps geographic points to tile identifiers, keeps one TileDescriptor per
tile, chooses the remote fetcher for each source, and tracks sources whose
remote service became unreachable. All public async methods wrap the
blocking descriptor calls via asyncio.to_thread().
"""

import asyncio
import logging
import math
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_INTERPOLATION,
    DEFAULT_SOURCE,
    INTERPOLATION_METHODS,
    TILE_SOURCES,
    EnvVar,
    ErrorMessages,
    FetchProtocol,
    TileNaming,
)
from .decoder import RasterioTileDecoder, TileDecoder
from .errors import TileAcquisitionError
from .ftp import FtpFetcher
from .raster_io import sample_elevation
from .remote import HttpFetcher, RemoteFetcher
from .tile import ElevationTile
from .tile_descriptor import TileDescriptor, TileState

logger = logging.getLogger(__name__)


@dataclass
class TileResult:
    """Outcome of a tile request."""

    source: str
    tile_name: str
    state: str
    available: bool
    shape: list[int]
    elevation_range: list[float]
    local_path: str
    archive_path: str
    remote_enabled: bool
    message: str


@dataclass
class PointResult:
    """Result of a single-point elevation query."""

    source: str
    tile_name: str
    elevation_m: float
    available: bool


class TileManager:
    """Central manager for tile descriptors."""

    def __init__(
        self,
        cache_dir: str | Path | None = None,
        default_source: str | None = None,
        decoder: TileDecoder | None = None,
        fetcher_factory: Callable[[dict], RemoteFetcher] | None = None,
    ) -> None:
        cache_dir = cache_dir or os.environ.get(EnvVar.TILE_CACHE_DIR, DEFAULT_CACHE_DIR)
        self.cache_dir = Path(os.path.expanduser(str(cache_dir)))
        self.default_source = default_source or os.environ.get(
            EnvVar.DEFAULT_SOURCE, DEFAULT_SOURCE
        )
        self.decoder = decoder or RasterioTileDecoder()
        self._fetcher_factory = fetcher_factory or self._make_fetcher

        # (source, tile_name) -> descriptor
        self._descriptors: dict[tuple[str, str], TileDescriptor] = {}
        self._offline_sources: set[str] = set()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Discovery (sync, no I/O)
    # ------------------------------------------------------------------

    def list_sources(self) -> list[dict]:
        """List all available tile sources."""
        return [
            {
                "id": src["id"],
                "name": src["name"],
                "protocol": src["protocol"],
                "resolution_m": src["resolution_m"],
                "coverage": src["coverage"],
                "tile_size_degrees": src["tile_size_degrees"],
            }
            for src in TILE_SOURCES.values()
        ]

    def describe_source(self, source: str) -> dict:
        """Get detailed metadata for a tile source, with remote overrides applied."""
        src = self._get_source(source)
        return {
            "id": src["id"],
            "name": src["name"],
            "protocol": src["protocol"],
            "resolution_m": src["resolution_m"],
            "coverage": src["coverage"],
            "coverage_bounds": list(src["coverage_bounds"]),
            "tile_size_degrees": src["tile_size_degrees"],
            "file_extension": src["file_extension"],
            "remote_location": self._remote_location(src),
            "license": src["license"],
            "offline": source in self._offline_sources,
        }

    @property
    def offline_sources(self) -> list[str]:
        return sorted(self._offline_sources)

    @property
    def tracked_tiles(self) -> int:
        return len(self._descriptors)

    def state_counts(self) -> dict[str, int]:
        """Number of tracked descriptors in each state."""
        counts: dict[str, int] = {}
        for descriptor in list(self._descriptors.values()):
            counts[descriptor.state.value] = counts.get(descriptor.state.value, 0) + 1
        return counts

    # ------------------------------------------------------------------
    # Tile identification
    # ------------------------------------------------------------------

    def tile_index(self, source: str, lon: float, lat: float) -> tuple[int, int]:
        """Tile grid index for a point: (x, y) for CGIAR tiles, (lat, lon) for HGT tiles."""
        src = self._get_source(source)
        self._validate_point(src, lon, lat)

        if src["naming"] == TileNaming.CGIAR_5DEG:
            size = src["tile_size_degrees"]
            x = int(math.floor((lon + 180.0) / size)) + 1
            y = int(math.floor((60.0 - lat) / size)) + 1
            return min(x, int(360 / size)), min(y, int(120 / size))

        return int(math.floor(lat)), int(math.floor(lon))

    def tile_name_for(self, source: str, lon: float, lat: float) -> str:
        """Plain tile file name covering a point."""
        src = self._get_source(source)
        a, b = self.tile_index(source, lon, lat)
        if src["naming"] == TileNaming.CGIAR_5DEG:
            stem = f"srtm_{a:02d}_{b:02d}"
        else:
            stem = self._make_tile_id(a, b)
        return stem + src["file_extension"]

    def _make_tile_id(self, lat: int, lon: int) -> str:
        """Construct a 1-degree tile ID for a given lat/lon."""
        ns = "N" if lat >= 0 else "S"
        ew = "E" if lon >= 0 else "W"
        return f"{ns}{abs(lat):02d}{ew}{abs(lon):03d}"

    # ------------------------------------------------------------------
    # Descriptors
    # ------------------------------------------------------------------

    def get_descriptor(self, source: str, lon: float, lat: float) -> TileDescriptor:
        """Return the descriptor for the tile covering a point, creating it once."""
        src = self._get_source(source)
        tile_name = self.tile_name_for(source, lon, lat)
        key = (source, tile_name)

        with self._lock:
            descriptor = self._descriptors.get(key)
            if descriptor is None:
                descriptor = TileDescriptor(
                    local_path=self.cache_dir / source / tile_name,
                    fetcher=self._fetcher_factory(src),
                    decoder=self.decoder,
                    archive_template=src["archive_template"],
                )
                if source in self._offline_sources:
                    descriptor.disable_remote()
                self._descriptors[key] = descriptor
                logger.debug(f"Tracking {descriptor}")
        return descriptor

    def release(self, source: str | None = None) -> int:
        """Dispose descriptors (all, or those of one source). Returns how many."""
        with self._lock:
            keys = [k for k in self._descriptors if source is None or k[0] == source]
            released = [self._descriptors.pop(k) for k in keys]

        for descriptor in released:
            descriptor.dispose()
        logger.info(f"Released {len(released)} tile descriptors")
        return len(released)

    # ------------------------------------------------------------------
    # Acquisition (async)
    # ------------------------------------------------------------------

    async def get_tile(self, lon: float, lat: float, source: str | None = None) -> TileResult:
        """Acquire the tile covering a point."""
        source = source or self.default_source
        descriptor = self.get_descriptor(source, lon, lat)
        tile = await self._acquire(source, descriptor)
        return self._to_result(source, descriptor, tile)

    async def get_elevation(
        self,
        lon: float,
        lat: float,
        source: str | None = None,
        interpolation: str = DEFAULT_INTERPOLATION,
    ) -> PointResult:
        """Get elevation at a single point; NaN when the tile is unavailable."""
        if interpolation not in INTERPOLATION_METHODS:
            raise ValueError(
                ErrorMessages.INVALID_INTERPOLATION.format(
                    interpolation, ", ".join(INTERPOLATION_METHODS)
                )
            )
        source = source or self.default_source
        descriptor = self.get_descriptor(source, lon, lat)
        tile = await self._acquire(source, descriptor)
        # Hold the array itself; a concurrent release may dispose the tile
        data = tile.data if tile is not None else None

        if tile is None or data is None:
            return PointResult(
                source=source,
                tile_name=descriptor.tile_name,
                elevation_m=float("nan"),
                available=False,
            )

        value = await asyncio.to_thread(
            sample_elevation, data, tile.transform, lon, lat, interpolation
        )
        return PointResult(
            source=source,
            tile_name=descriptor.tile_name,
            elevation_m=value,
            available=not math.isnan(value),
        )

    def tile_status(self, lon: float, lat: float, source: str | None = None) -> TileResult:
        """Snapshot of a tile's state without performing any I/O."""
        source = source or self.default_source
        descriptor = self.get_descriptor(source, lon, lat)
        return self._to_result(source, descriptor, descriptor.cached_tile)

    async def _acquire(self, source: str, descriptor: TileDescriptor) -> ElevationTile | None:
        try:
            return await asyncio.to_thread(descriptor.get_tile)
        except TileAcquisitionError:
            self._mark_offline(source)
            raise

    def _mark_offline(self, source: str) -> None:
        with self._lock:
            if source in self._offline_sources:
                return
            self._offline_sources.add(source)
            for (src_id, _), descriptor in self._descriptors.items():
                if src_id == source:
                    descriptor.disable_remote()
        logger.error(ErrorMessages.SOURCE_OFFLINE.format(source))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_source(self, source: str) -> dict:
        """Get source metadata, raising ValueError if unknown."""
        if source not in TILE_SOURCES:
            raise ValueError(
                ErrorMessages.UNKNOWN_SOURCE.format(source, ", ".join(TILE_SOURCES.keys()))
            )
        return TILE_SOURCES[source]

    def _validate_point(self, src: dict, lon: float, lat: float) -> None:
        west, south, east, north = src["coverage_bounds"]
        if not (west <= lon <= east and south <= lat <= north):
            raise ValueError(ErrorMessages.OUTSIDE_COVERAGE.format(src["name"], lon, lat))

    def _resolve(self, src: dict, key: str) -> str | None:
        env_key = src.get(f"{key}_env")
        if env_key and os.environ.get(env_key):
            return os.environ[env_key]
        return src.get(key)

    def _remote_location(self, src: dict) -> str:
        if src["protocol"] == FetchProtocol.FTP:
            return f"ftp://{self._resolve(src, 'ftp_host')}{self._resolve(src, 'ftp_path')}"
        return str(self._resolve(src, "url"))

    def _make_fetcher(self, src: dict) -> RemoteFetcher:
        """Choose the remote fetcher for a source from its protocol."""
        if src["protocol"] == FetchProtocol.FTP:
            return FtpFetcher(
                host=str(self._resolve(src, "ftp_host")),
                remote_path=str(self._resolve(src, "ftp_path")),
            )
        return HttpFetcher(base_url=str(self._resolve(src, "url")))

    def _to_result(
        self,
        source: str,
        descriptor: TileDescriptor,
        tile: ElevationTile | None,
    ) -> TileResult:
        return TileResult(
            source=source,
            tile_name=descriptor.tile_name,
            state=descriptor.state.value,
            available=tile is not None and descriptor.state is TileState.READY,
            shape=tile.shape if tile is not None else [0, 0],
            elevation_range=tile.elevation_range if tile is not None else [0.0, 0.0],
            local_path=str(descriptor.local_path),
            archive_path=str(descriptor.archive_path),
            remote_enabled=descriptor.remote_enabled,
            message=descriptor.last_message,
        )
