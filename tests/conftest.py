"""Shared test fixtures for chuk-mcp-dem-tiles."""

import threading
import zipfile
from pathlib import Path

import numpy as np
import pytest
from unittest.mock import MagicMock

from chuk_mcp_dem_tiles.core.outcome import FetchOutcome
from chuk_mcp_dem_tiles.core.remote import RemoteFetcher
from chuk_mcp_dem_tiles.core.tile import ElevationTile


# ---------------------------------------------------------------------------
# Raster helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_elevation():
    """100x100 elevation array with values 100-500m."""
    np.random.seed(42)
    return np.random.uniform(100, 500, (100, 100)).astype(np.float32)


@pytest.fixture
def sample_transform():
    """Affine transform for a 1-degree tile at N46 E007."""
    from rasterio.transform import Affine

    return Affine(0.01, 0.0, 7.0, 0.0, -0.01, 47.0)


@pytest.fixture
def sample_crs():
    """EPSG:4326 CRS."""
    from rasterio.crs import CRS

    return CRS.from_epsg(4326)


def write_geotiff(path: Path, data, transform, crs, nodata=None) -> Path:
    """Write a single-band GeoTIFF with rasterio."""
    import rasterio

    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=data.shape[0],
        width=data.shape[1],
        count=1,
        dtype=str(data.dtype),
        crs=crs,
        transform=transform,
        nodata=nodata,
    ) as dst:
        dst.write(data, 1)
    return path


def write_zip(path: Path, entries: dict[str, bytes]) -> Path:
    """Write a zip archive holding the given entries."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, payload in entries.items():
            archive.writestr(name, payload)
    return path


@pytest.fixture
def geotiff_bytes(tmp_path, sample_elevation, sample_transform, sample_crs):
    """Raw bytes of a valid GeoTIFF tile."""
    path = write_geotiff(
        tmp_path / "scratch" / "tile.tif", sample_elevation, sample_transform, sample_crs
    )
    return path.read_bytes()


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeFetcher(RemoteFetcher):
    """Fetcher returning scripted outcomes; writes ``payload`` on success."""

    def __init__(self, outcomes=None, payload: bytes | None = None, gate=None) -> None:
        self.outcomes = list(outcomes or [])
        self.payload = payload
        self.gate = gate
        self.calls = 0
        self.closed = 0

    def fetch(self, archive_path: Path) -> FetchOutcome:
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        outcome = self.outcomes.pop(0) if self.outcomes else FetchOutcome.success(archive_path)
        if outcome.ok and self.payload is not None:
            archive_path.parent.mkdir(parents=True, exist_ok=True)
            archive_path.write_bytes(self.payload)
        return outcome

    def describe(self, archive_name: str) -> str:
        return f"fake://{archive_name}"

    def close(self) -> None:
        self.closed += 1


class FakeDecoder:
    """Decoder that returns a small tile (or a scripted result) and counts calls."""

    def __init__(self, result="tile", error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls = 0
        self._lock = threading.Lock()

    def _decode(self, tile_name: str):
        with self._lock:
            self.calls += 1
        if self.error is not None:
            raise self.error
        if self.result is None:
            return None
        from rasterio.transform import Affine

        return ElevationTile(
            name=tile_name,
            data=np.full((4, 4), 250.0, dtype=np.float32),
            transform=Affine(0.25, 0.0, 7.0, 0.0, -0.25, 47.0),
            crs="EPSG:4326",
        )

    def decode_file(self, path, tile_name):
        return self._decode(tile_name)

    def decode_bytes(self, data, tile_name):
        return self._decode(tile_name)


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def fake_decoder():
    return FakeDecoder()


@pytest.fixture
def mock_manager(tmp_path):
    """TileManager with a temporary cache and no real network."""
    from chuk_mcp_dem_tiles.core.tile_manager import TileManager

    return TileManager(cache_dir=tmp_path / "cache", fetcher_factory=lambda src: FakeFetcher())


@pytest.fixture
def mock_mcp():
    """Mock ChukMCPServer."""
    mcp = MagicMock()
    mcp.tool = MagicMock(return_value=lambda fn: fn)
    return mcp
