"""Response models for chuk-mcp-dem-tiles."""

from .responses import (
    ErrorResponse,
    PointElevationResponse,
    ReleaseResponse,
    SourceDetailResponse,
    SourceInfo,
    SourcesResponse,
    StatusResponse,
    TileResponse,
    format_response,
)

__all__ = [
    "ErrorResponse",
    "SourceInfo",
    "SourcesResponse",
    "SourceDetailResponse",
    "TileResponse",
    "PointElevationResponse",
    "ReleaseResponse",
    "StatusResponse",
    "format_response",
]
