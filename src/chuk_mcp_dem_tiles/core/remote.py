"""
Remote fetchers — one download attempt of a tile archive.

Every fetcher writes the archive to the local path it is given and reports a
FetchOutcome instead of raising. The HTTP fetcher lives here; the FTP
fetcher is in ``ftp.py``.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    HTTP_TIMEOUT_S,
    RETRY_ATTEMPTS,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
    TRANSFER_BUFFER_SIZE,
    ErrorMessages,
)
from .outcome import FetchOutcome

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Retry decorator for transient HTTP failures
# ---------------------------------------------------------------------------

_retry_network = retry(
    stop=stop_after_attempt(RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    reraise=True,
)


class RemoteFetcher(ABC):
    """A remote location that tile archives can be downloaded from."""

    @abstractmethod
    def fetch(self, archive_path: Path) -> FetchOutcome:
        """Download ``archive_path.name`` from the remote into ``archive_path``."""

    @abstractmethod
    def describe(self, archive_name: str) -> str:
        """Human-readable remote location of an archive."""

    def close(self) -> None:
        """Release any session held by the fetcher."""


class HttpFetcher(RemoteFetcher):
    """Download tile archives with HTTP GET from a base URL."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = HTTP_TIMEOUT_S,
        chunk_size: int = TRANSFER_BUFFER_SIZE,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.chunk_size = chunk_size
        self._session = session
        self._owns_session = session is None

    def describe(self, archive_name: str) -> str:
        return f"{self.base_url.rstrip('/')}/{archive_name}"

    def fetch(self, archive_path: Path) -> FetchOutcome:
        url = self.describe(archive_path.name)
        logger.info(f"http retrieving {url}")
        try:
            written = self._download(url, archive_path)
        except (requests.RequestException, OSError) as e:
            # Tiles may be missing because they are over the ocean or outside valid areas
            archive_path.unlink(missing_ok=True)
            message = ErrorMessages.HTTP_FAILED.format(e, url)
            logger.warning(message)
            return FetchOutcome.absent(message, error=e)

        logger.info(f"Downloaded {written} bytes to {archive_path}")
        return FetchOutcome.success(archive_path)

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @_retry_network
    def _download(self, url: str, archive_path: Path) -> int:
        """Stream ``url`` to ``archive_path``, returning the number of bytes written."""
        session = self._get_session()
        archive_path.parent.mkdir(parents=True, exist_ok=True)

        with session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            # Content-Length counts encoded bytes; iter_content yields decoded ones
            expected = None
            if not response.headers.get("Content-Encoding"):
                expected = response.headers.get("Content-Length")

            written = 0
            try:
                with open(archive_path, "wb") as fh:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            fh.write(chunk)
                            written += len(chunk)
                    fh.flush()
                    os.fsync(fh.fileno())
            except BaseException:
                archive_path.unlink(missing_ok=True)
                raise

        if expected is not None and int(expected) != written:
            archive_path.unlink(missing_ok=True)
            raise OSError(ErrorMessages.SIZE_MISMATCH.format(url, expected, written))
        return written
