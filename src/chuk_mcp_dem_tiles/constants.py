"""
Constants for chuk-mcp-dem-tiles.

All magic strings, tile source metadata, and configuration values live here.
"""


class ServerConfig:
    NAME = "chuk-mcp-dem-tiles"
    VERSION = "0.1.0"
    DESCRIPTION = "Elevation Tile Acquisition & Caching MCP Server"


class EnvVar:
    TILE_CACHE_DIR = "DEM_TILE_CACHE_DIR"
    DEFAULT_SOURCE = "DEM_DEFAULT_SOURCE"
    SRTM3_HTTP_URL = "DEM_SRTM3_HTTP_URL"
    SRTM3_FTP_HOST = "DEM_SRTM3_FTP_HOST"
    SRTM3_FTP_PATH = "DEM_SRTM3_FTP_PATH"
    SRTM1_HTTP_URL = "DEM_SRTM1_HTTP_URL"
    MCP_STDIO = "MCP_STDIO"


class FetchProtocol:
    HTTP = "http"
    FTP = "ftp"


class TileSource:
    SRTM3 = "srtm3"
    SRTM3_FTP = "srtm3_ftp"
    SRTM1 = "srtm1"


class TileNaming:
    CGIAR_5DEG = "cgiar_5deg"
    HGT_1DEG = "hgt_1deg"


DEFAULT_SOURCE = TileSource.SRTM3
DEFAULT_CACHE_DIR = "~/.cache/chuk-mcp-dem-tiles"

ARCHIVE_EXTENSION = ".zip"
DEFAULT_ARCHIVE_TEMPLATE = "{stem}" + ARCHIVE_EXTENSION

# Full source metadata. "url" is the HTTP base URL; "ftp_host" and
# "ftp_path" describe the FTP remote root. The matching EnvVar overrides.
# "archive_template" names the remote archive from the plain tile stem.
TILE_SOURCES: dict[str, dict] = {
    TileSource.SRTM3: {
        "id": TileSource.SRTM3,
        "name": "CGIAR-CSI SRTM 90m v4.1",
        "protocol": FetchProtocol.HTTP,
        "resolution_m": 90,
        "coverage": "60N-60S",
        "coverage_bounds": [-180, -60, 180, 60],
        "tile_size_degrees": 5.0,
        "naming": TileNaming.CGIAR_5DEG,
        "file_extension": ".tif",
        "archive_template": DEFAULT_ARCHIVE_TEMPLATE,
        "url": "https://srtm.csi.cgiar.org/wp-content/uploads/files/srtm_5x5/TIFF/",
        "url_env": EnvVar.SRTM3_HTTP_URL,
        "ftp_host": None,
        "ftp_host_env": None,
        "ftp_path": None,
        "ftp_path_env": None,
        "license": "CGIAR-CSI terms of use",
    },
    TileSource.SRTM3_FTP: {
        "id": TileSource.SRTM3_FTP,
        "name": "CGIAR-CSI SRTM 90m v4.1 (FTP)",
        "protocol": FetchProtocol.FTP,
        "resolution_m": 90,
        "coverage": "60N-60S",
        "coverage_bounds": [-180, -60, 180, 60],
        "tile_size_degrees": 5.0,
        "naming": TileNaming.CGIAR_5DEG,
        "file_extension": ".tif",
        "archive_template": DEFAULT_ARCHIVE_TEMPLATE,
        "url": None,
        "url_env": None,
        "ftp_host": "srtm.csi.cgiar.org",
        "ftp_host_env": EnvVar.SRTM3_FTP_HOST,
        "ftp_path": "/SRTM_V41/SRTM_Data_GeoTiff/",
        "ftp_path_env": EnvVar.SRTM3_FTP_PATH,
        "license": "CGIAR-CSI terms of use",
    },
    TileSource.SRTM1: {
        "id": TileSource.SRTM1,
        "name": "SRTM 1Sec HGT",
        "protocol": FetchProtocol.HTTP,
        "resolution_m": 30,
        "coverage": "60N-56S",
        "coverage_bounds": [-180, -56, 180, 60],
        "tile_size_degrees": 1.0,
        "naming": TileNaming.HGT_1DEG,
        "file_extension": ".hgt",
        "archive_template": "{stem}.SRTMGL1.hgt.zip",
        "url": "https://step.esa.int/auxdata/dem/SRTMGL1/",
        "url_env": EnvVar.SRTM1_HTTP_URL,
        "ftp_host": None,
        "ftp_host_env": None,
        "ftp_path": None,
        "ftp_path_env": None,
        "license": "Public Domain",
    },
}

ALL_SOURCE_IDS = list(TILE_SOURCES.keys())

# Interpolation methods
INTERPOLATION_METHODS = ["nearest", "bilinear"]
DEFAULT_INTERPOLATION = "bilinear"

# Transfer & retry
TRANSFER_BUFFER_SIZE = 32768
HTTP_TIMEOUT_S = 60.0
FTP_TIMEOUT_S = 60.0
RETRY_ATTEMPTS = 3
RETRY_WAIT_MIN = 1
RETRY_WAIT_MAX = 10


class ErrorMessages:
    UNKNOWN_SOURCE = "Unknown tile source '{}'. Available: {}"
    OUTSIDE_COVERAGE = "{} does not cover ({}, {})"
    INVALID_INTERPOLATION = "Invalid interpolation '{}'. Available: {}"
    ENTRY_NOT_FOUND = "Entry '{}' not found in zip file {}"
    NOT_AN_ARCHIVE = "{} is not a zip archive"
    FTP_CONNECT_FAILED = "Failed to connect to FTP {}: {}"
    FTP_CONNECTION_LOST = "Connection to FTP {} lost: {}"
    FTP_RETRIEVE_FAILED = "FTP retrieval of {} failed ({})"
    HTTP_FAILED = "http error: {} on {}"
    SIZE_MISMATCH = "Size mismatch for {}: expected {} bytes, got {}"
    TILE_UNRECOVERABLE = "Tile {} cannot be acquired: remote source unreachable"
    LOCAL_VANISHED = "Local copy of {} disappeared before decoding"
    DECODE_FAILED = "Unable to read tile {}: {}"
    SOURCE_OFFLINE = "Remote source '{}' is offline for this session"


class SuccessMessages:
    SOURCES_LIST = "{} tile sources available"
    SOURCE_DESCRIBE = "Source: {} ({}m, {})"
    TILE_READY = "Tile {} ready ({}x{})"
    TILE_ABSENT = "Tile {} is not available (no data at this location)"
    TILE_PENDING = "Tile {} could not be acquired right now ({})"
    TILE_INFO = "Tile {} is {}"
    POINT_ELEVATION = "Elevation at point: {:.1f}m"
    POINT_NO_DATA = "No elevation data at ({}, {})"
    RELEASED = "Released {} tile descriptors"
    STATUS = "{} v{} ({} sources, {} tiles tracked)"
