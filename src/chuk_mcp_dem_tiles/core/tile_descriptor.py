"""
TileDescriptor — per-tile acquisition state machine.

A descriptor knows where one tile lives locally (plain file or zip archive
sibling) and which remote fetcher can supply it. ``get_tile()`` probes local
storage, fetches from the remote when needed, decodes, and caches the
decoded tile for the lifetime of the descriptor.

One acquisition runs at a time per descriptor: concurrent callers block on
the descriptor lock and then see the cached result.

State flow::

    UNKNOWN --probe--> LOCAL | REMOTE
    REMOTE / LOCAL_ERROR --fetch--> LOCAL | ABSENT | FATAL   (RECOVERABLE: unchanged)
    LOCAL --decode--> READY | ABSENT | LOCAL_ERROR
"""

import logging
import threading
from enum import Enum
from pathlib import Path

from ..constants import DEFAULT_ARCHIVE_TEMPLATE, ErrorMessages
from .archive import ArchiveEntryResolver, is_archive
from .decoder import TileDecoder
from .errors import TileAcquisitionError
from .local_probe import LocalCacheProbe
from .outcome import FetchOutcome, FetchStatus
from .remote import RemoteFetcher
from .tile import ElevationTile

logger = logging.getLogger(__name__)


class TileState(str, Enum):
    """Acquisition state of one tile.

    ABSENT covers two cases: the remote reported the tile missing, or the
    local copy decoded to no elevation product (all voids). Neither is
    retried for the rest of the session.
    """

    UNKNOWN = "unknown"
    LOCAL = "local"
    REMOTE = "remote"
    LOCAL_ERROR = "local_error"
    READY = "ready"
    ABSENT = "absent"
    FATAL = "fatal"


class TileDescriptor:
    """Acquire, decode, and cache a single elevation tile."""

    def __init__(
        self,
        local_path: Path,
        fetcher: RemoteFetcher | None,
        decoder: TileDecoder,
        resolver: ArchiveEntryResolver | None = None,
        archive_template: str = DEFAULT_ARCHIVE_TEMPLATE,
    ) -> None:
        self._probe = LocalCacheProbe(Path(local_path), archive_template)
        self._fetcher = fetcher
        self._decoder = decoder
        self._resolver = resolver or ArchiveEntryResolver()

        self._lock = threading.Lock()
        self._state = TileState.UNKNOWN
        self._tile: ElevationTile | None = None
        self._last_message = ""
        self._remote_enabled = True

    # ------------------------------------------------------------------
    # Identity & state
    # ------------------------------------------------------------------

    @property
    def tile_name(self) -> str:
        return self._probe.plain_path.name

    @property
    def local_path(self) -> Path:
        return self._probe.plain_path

    @property
    def archive_path(self) -> Path:
        return self._probe.archive_path

    @property
    def state(self) -> TileState:
        return self._state

    @property
    def last_message(self) -> str:
        """Reason recorded by the most recent failed or absent acquisition."""
        return self._last_message

    @property
    def local_file_exists(self) -> bool:
        return self._state in (TileState.LOCAL, TileState.READY)

    @property
    def remote_file_exists(self) -> bool:
        return self._state is not TileState.ABSENT

    @property
    def error_in_local_file(self) -> bool:
        return self._state is TileState.LOCAL_ERROR

    @property
    def unrecoverable_error(self) -> bool:
        return self._state is TileState.FATAL

    @property
    def cached_tile(self) -> ElevationTile | None:
        return self._tile

    @property
    def remote_enabled(self) -> bool:
        return self._remote_enabled and self._fetcher is not None

    def disable_remote(self) -> None:
        """Stop attempting remote fetches; local copies are still used."""
        self._remote_enabled = False

    def __repr__(self) -> str:
        return f"TileDescriptor({self.tile_name!r}, state={self._state.value})"

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def get_tile(self) -> ElevationTile | None:
        """
        Return the decoded tile, acquiring it first if necessary.

        Returns:
            The cached tile, or None if the tile does not exist or could not
            be acquired right now (the next call retries)

        Raises:
            TileAcquisitionError: the remote source is unreachable
        """
        tile = self._tile
        if tile is not None:
            return tile
        if self._state is TileState.ABSENT:
            return None
        self._raise_if_fatal()

        with self._lock:
            if self._tile is not None:
                return self._tile
            if self._state is TileState.ABSENT:
                return None
            self._raise_if_fatal()
            return self._acquire()

    def _acquire(self) -> ElevationTile | None:
        source: Path | None = None
        if self._state is TileState.UNKNOWN:
            self._state = TileState.LOCAL if self._probe.exists() else TileState.REMOTE

        if self._state in (TileState.REMOTE, TileState.LOCAL_ERROR):
            if not self.remote_enabled:
                return None
            fetched = self._fetch_remote()
            if fetched.status is FetchStatus.SUCCESS:
                self._state = TileState.LOCAL
                # Decode what was just downloaded, not a stale plain file
                source = self.archive_path
            elif fetched.status is FetchStatus.ABSENT:
                self._state = TileState.ABSENT
                self._last_message = fetched.message
                return None
            elif fetched.status is FetchStatus.FATAL:
                self._state = TileState.FATAL
                self._last_message = fetched.message
                raise TileAcquisitionError(
                    self.tile_name, ErrorMessages.TILE_UNRECOVERABLE.format(self.tile_name)
                ) from fetched.error
            else:
                self._last_message = fetched.message
                return None

        decoded = self._decode_local(source)
        if decoded.status is FetchStatus.SUCCESS:
            self._tile = decoded.value
            self._state = TileState.READY
            self._last_message = ""
            return self._tile

        self._release_tile()
        self._last_message = decoded.message
        if decoded.status is FetchStatus.ABSENT:
            self._state = TileState.ABSENT
        else:
            logger.warning(decoded.message)
            self._state = TileState.LOCAL_ERROR
        return None

    def _fetch_remote(self) -> FetchOutcome:
        if self._fetcher is None:
            return FetchOutcome.recoverable(f"No remote configured for {self.tile_name}")
        try:
            return self._fetcher.fetch(self.archive_path)
        except Exception as e:
            # Fetchers report failures as outcomes; anything raised is unexpected
            logger.error(f"Remote fetch of {self.tile_name} failed: {e}")
            self._probe.remove_archive()
            return FetchOutcome.recoverable(str(e), error=e)

    def _decode_local(self, path: Path | None = None) -> FetchOutcome:
        if path is None or not path.is_file():
            path = self._probe.locate()
        if path is None:
            return FetchOutcome.recoverable(ErrorMessages.LOCAL_VANISHED.format(self.tile_name))

        try:
            if is_archive(path):
                data = self._resolver.read_entry(path, self.tile_name)
                tile = self._decoder.decode_bytes(data, self.tile_name)
            else:
                tile = self._decoder.decode_file(path, self.tile_name)
        except Exception as e:
            return FetchOutcome.recoverable(ErrorMessages.DECODE_FAILED.format(path, e), error=e)

        if tile is None:
            return FetchOutcome.absent(f"{self.tile_name} holds no elevation product")
        return FetchOutcome.success(tile)

    def _raise_if_fatal(self) -> None:
        if self._state is TileState.FATAL:
            raise TileAcquisitionError(
                self.tile_name, ErrorMessages.TILE_UNRECOVERABLE.format(self.tile_name)
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Close the remote session and release the cached tile. Idempotent; never raises."""
        with self._lock:
            try:
                if self._fetcher is not None:
                    self._fetcher.close()
            except Exception as e:
                logger.debug(f"Ignoring error closing fetcher for {self.tile_name}: {e}")
            try:
                self._release_tile()
            except Exception as e:
                logger.debug(f"Ignoring error disposing {self.tile_name}: {e}")
            if self._state is TileState.READY:
                self._state = TileState.UNKNOWN

    def _release_tile(self) -> None:
        tile, self._tile = self._tile, None
        if tile is not None:
            tile.dispose()
