"""Exceptions raised by the tile acquisition core."""


class TileAcquisitionError(RuntimeError):
    """A tile cannot be acquired because its remote source became unreachable.

    Raised by ``TileDescriptor.get_tile()`` on the call that detects the
    failure and on every later call for the same descriptor.
    """

    def __init__(self, tile_name: str, message: str) -> None:
        super().__init__(message)
        self.tile_name = tile_name


class MalformedArchiveError(OSError):
    """A local archive exists but does not contain the expected tile entry."""

    def __init__(self, archive_path: str, entry_name: str, message: str) -> None:
        super().__init__(message)
        self.archive_path = archive_path
        self.entry_name = entry_name
