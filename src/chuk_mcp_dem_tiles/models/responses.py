"""
Response models for chuk-mcp-dem-tiles tools.

All tool responses are Pydantic models for type safety and consistent API.
"""

from pydantic import BaseModel, ConfigDict, Field


def format_response(model: BaseModel, output_mode: str = "json") -> str:
    """Format a response model as JSON or human-readable text.

    Args:
        model: Pydantic response model instance
        output_mode: "json" (default) or "text"

    Returns:
        Formatted string
    """
    if output_mode == "text" and hasattr(model, "to_text"):
        return str(model.to_text())
    return str(model.model_dump_json())


class ErrorResponse(BaseModel):
    """Error response model for tool failures."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message describing what went wrong")

    def to_text(self) -> str:
        return f"Error: {self.error}"


class SourceInfo(BaseModel):
    """Summary information about a tile source."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Source identifier (e.g., srtm3)")
    name: str = Field(..., description="Human-readable source name")
    protocol: str = Field(..., description="Remote protocol (http or ftp)")
    resolution_m: int = Field(..., description="Native resolution in metres")
    coverage: str = Field(..., description="Coverage description (e.g., 60N-60S)")
    tile_size_degrees: float = Field(..., description="Tile size in degrees")

    def to_text(self) -> str:
        return (
            f"{self.id}: {self.name} ({self.resolution_m}m, {self.coverage}, "
            f"{self.tile_size_degrees:g} deg tiles via {self.protocol})"
        )


class SourcesResponse(BaseModel):
    """Response model for listing available tile sources."""

    model_config = ConfigDict(extra="forbid")

    sources: list[SourceInfo] = Field(..., description="Available tile sources")
    default: str = Field(..., description="Default source identifier")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, f"Default: {self.default}", ""]
        for s in self.sources:
            lines.append(f"  {s.to_text()}")
        return "\n".join(lines)


class SourceDetailResponse(BaseModel):
    """Response model for detailed tile source description."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Source identifier")
    name: str = Field(..., description="Human-readable source name")
    protocol: str = Field(..., description="Remote protocol (http or ftp)")
    resolution_m: int = Field(..., description="Native resolution in metres")
    coverage: str = Field(..., description="Coverage description")
    coverage_bounds: list[float] = Field(
        ..., description="Coverage bounding box [west, south, east, north]"
    )
    tile_size_degrees: float = Field(..., description="Tile size in degrees")
    file_extension: str = Field(..., description="Plain tile file extension")
    remote_location: str = Field(..., description="Remote URL or FTP root tiles are fetched from")
    license: str = Field(..., description="Data license")
    offline: bool = Field(..., description="Whether the remote was found unreachable this session")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        bounds = ", ".join(f"{b:.1f}" for b in self.coverage_bounds)
        lines = [
            f"{self.name} ({self.id})",
            f"Resolution: {self.resolution_m}m",
            f"Coverage: {self.coverage} [{bounds}]",
            f"Tiles: {self.tile_size_degrees:g} deg ({self.file_extension})",
            f"Remote: {self.remote_location} ({self.protocol})",
            f"License: {self.license}",
        ]
        if self.offline:
            lines.append("Status: remote offline for this session")
        return "\n".join(lines)


class TileResponse(BaseModel):
    """Response model for a tile acquisition or tile status query."""

    model_config = ConfigDict(extra="forbid")

    source: str = Field(..., description="Tile source")
    lon: float = Field(..., description="Query longitude")
    lat: float = Field(..., description="Query latitude")
    tile_name: str = Field(..., description="Plain tile file name")
    state: str = Field(..., description="Descriptor state (unknown, local, remote, ready, ...)")
    available: bool = Field(..., description="Whether a decoded tile is available")
    shape: list[int] = Field(..., description="Tile dimensions [rows, cols]")
    elevation_range: list[float] = Field(..., description="[min, max] elevation in metres")
    local_path: str = Field(..., description="Local plain file path")
    archive_path: str = Field(..., description="Local archive path")
    remote_enabled: bool = Field(..., description="Whether remote fetching is still attempted")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            self.message,
            f"Tile: {self.tile_name} ({self.source})",
            f"State: {self.state}",
        ]
        if self.available:
            lines.append(f"Shape: {self.shape[0]}x{self.shape[1]}")
            lines.append(
                f"Elevation: {self.elevation_range[0]:.1f}m to {self.elevation_range[1]:.1f}m"
            )
        lines.append(f"Local: {self.local_path}")
        if not self.remote_enabled:
            lines.append("Remote fetching disabled")
        return "\n".join(lines)


class PointElevationResponse(BaseModel):
    """Response model for a single-point elevation query."""

    model_config = ConfigDict(extra="forbid")

    source: str = Field(..., description="Tile source")
    lon: float = Field(..., description="Longitude")
    lat: float = Field(..., description="Latitude")
    tile_name: str = Field(..., description="Tile the point falls in")
    elevation_m: float | None = Field(None, description="Elevation in metres, None if no data")
    interpolation: str = Field(..., description="Sampling method used")
    available: bool = Field(..., description="Whether elevation data exists at this point")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        if self.elevation_m is None:
            return f"{self.message}\nTile: {self.tile_name} ({self.source})"
        return (
            f"({self.lon}, {self.lat}): {self.elevation_m:.1f}m "
            f"[{self.interpolation}, {self.tile_name}]"
        )


class ReleaseResponse(BaseModel):
    """Response model for releasing tile descriptors."""

    model_config = ConfigDict(extra="forbid")

    source: str | None = Field(None, description="Source released, None for all")
    released: int = Field(..., description="Number of descriptors disposed", ge=0)
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return self.message


class StatusResponse(BaseModel):
    """Response model for server status."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    default_source: str = Field(..., description="Default tile source")
    available_sources: list[str] = Field(..., description="Available source identifiers")
    cache_dir: str = Field(..., description="Local tile cache directory")
    tracked_tiles: int = Field(..., description="Number of tile descriptors held", ge=0)
    tile_states: dict[str, int] = Field(..., description="Descriptor count per state")
    offline_sources: list[str] = Field(..., description="Sources whose remote is unreachable")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"{self.server} v{self.version}",
            f"Default source: {self.default_source}",
            f"Sources: {', '.join(self.available_sources)}",
            f"Cache: {self.cache_dir}",
            f"Tracked tiles: {self.tracked_tiles}",
        ]
        for state, count in sorted(self.tile_states.items()):
            lines.append(f"  {state}: {count}")
        if self.offline_sources:
            lines.append(f"Offline: {', '.join(self.offline_sources)}")
        return "\n".join(lines)
