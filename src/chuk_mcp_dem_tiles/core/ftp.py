"""
FTP tile retrieval.

FtpSession is an explicit wrapper around one ftplib connection with an
open/close lifecycle. FtpFetcher owns a session plus the cached size listing
of its remote root and reuses both across sequential fetches until a
connection problem forces a reconnect.

Socket-level failures (refused or reset connections, timeouts, name
resolution, unreachable networks or hosts) mean the remote service is
unreachable and are reported as FATAL. Everything else is either a benign
absence or recoverable.
"""

import errno
import ftplib
import logging
import posixpath
import socket
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from ..constants import FTP_TIMEOUT_S, TRANSFER_BUFFER_SIZE, ErrorMessages
from .outcome import FetchOutcome
from .remote import RemoteFetcher

logger = logging.getLogger(__name__)

SOCKET_ERRORS = (ConnectionError, TimeoutError, socket.gaierror, socket.herror)

# Routing failures surface as plain OSError rather than ConnectionError
SOCKET_ERRNOS = frozenset(
    {errno.ENETUNREACH, errno.EHOSTUNREACH, errno.ENETDOWN, errno.EHOSTDOWN, errno.ENETRESET}
)


def is_socket_error(error: BaseException) -> bool:
    """True when ``error`` means the remote host cannot be reached."""
    if isinstance(error, SOCKET_ERRORS):
        return True
    return isinstance(error, OSError) and error.errno in SOCKET_ERRNOS


# Protocol-level failures that leave the control connection usable
_PROTOCOL_ERRORS = (ftplib.error_temp, ftplib.error_reply, ftplib.error_proto, EOFError)


class FtpStatus(str, Enum):
    OK = "ok"
    FILE_NOT_FOUND = "file_not_found"
    READ_ERROR = "read_error"


class FtpSession:
    """One anonymous (or authenticated) binary-mode FTP connection."""

    def __init__(
        self,
        host: str,
        user: str = "anonymous",
        password: str = "",
        timeout: float = FTP_TIMEOUT_S,
        ftp_factory: Callable[[], ftplib.FTP] | None = None,
    ) -> None:
        self.host = host
        self.user = user
        self.password = password
        self.timeout = timeout
        self._ftp_factory = ftp_factory or ftplib.FTP
        self._ftp: ftplib.FTP | None = None

    @property
    def is_open(self) -> bool:
        return self._ftp is not None

    def open(self) -> None:
        if self._ftp is not None:
            return
        ftp = self._ftp_factory()
        try:
            ftp.connect(self.host, timeout=self.timeout)
            ftp.login(self.user, self.password)
            ftp.set_pasv(True)
            ftp.voidcmd("TYPE I")
        except BaseException:
            ftp.close()
            raise
        self._ftp = ftp
        logger.info(f"Connected to ftp://{self.host}")

    def close(self) -> None:
        ftp, self._ftp = self._ftp, None
        if ftp is None:
            return
        try:
            ftp.quit()
        except ftplib.all_errors:
            ftp.close()

    def __enter__(self) -> "FtpSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def list_sizes(self, remote_path: str) -> dict[str, int | None]:
        """Map each file name in ``remote_path`` to its size in bytes."""
        ftp = self._require_open()
        try:
            return {
                name: int(facts["size"]) if "size" in facts else None
                for name, facts in ftp.mlsd(remote_path, facts=["type", "size"])
                if facts.get("type", "file") == "file"
            }
        except ftplib.error_perm:
            logger.debug(f"MLSD unsupported on {self.host}, falling back to NLST")

        sizes: dict[str, int | None] = {}
        for entry in ftp.nlst(remote_path):
            name = posixpath.basename(entry)
            try:
                sizes[name] = ftp.size(posixpath.join(remote_path, name))
            except ftplib.error_perm:
                # Directories have no size
                continue
        return sizes

    def retrieve_file(
        self,
        remote_file: str,
        local_path: Path,
        expected_size: int | None = None,
    ) -> FtpStatus:
        """
        Download ``remote_file`` into ``local_path``.

        Socket-level errors propagate to the caller.

        Returns:
            OK, FILE_NOT_FOUND for a 550 reply, READ_ERROR otherwise
        """
        ftp = self._require_open()
        local_path.parent.mkdir(parents=True, exist_ok=True)

        with open(local_path, "wb") as fh:
            try:
                ftp.retrbinary(f"RETR {remote_file}", fh.write, blocksize=TRANSFER_BUFFER_SIZE)
            except ftplib.error_perm as e:
                if str(e).startswith("550"):
                    return FtpStatus.FILE_NOT_FOUND
                logger.warning(f"FTP permission error on {remote_file}: {e}")
                return FtpStatus.READ_ERROR
            except _PROTOCOL_ERRORS as e:
                logger.warning(f"FTP transfer of {remote_file} failed: {e}")
                return FtpStatus.READ_ERROR

        if expected_size is not None:
            actual = local_path.stat().st_size
            if actual != expected_size:
                logger.warning(
                    ErrorMessages.SIZE_MISMATCH.format(remote_file, expected_size, actual)
                )
                return FtpStatus.READ_ERROR
        return FtpStatus.OK

    def _require_open(self) -> ftplib.FTP:
        if self._ftp is None:
            raise RuntimeError(f"FTP session to {self.host} is not open")
        return self._ftp


class FtpFetcher(RemoteFetcher):
    """Download tile archives from a remote root on an FTP server."""

    def __init__(
        self,
        host: str,
        remote_path: str,
        session_factory: Callable[[str], FtpSession] = FtpSession,
    ) -> None:
        self.host = host
        self.remote_path = remote_path
        self._session_factory = session_factory
        self._session: FtpSession | None = None
        self._file_sizes: dict[str, int | None] | None = None

    @property
    def session(self) -> FtpSession | None:
        return self._session

    @property
    def file_sizes(self) -> dict[str, int | None] | None:
        return self._file_sizes

    def remote_file(self, archive_name: str) -> str:
        return posixpath.join(self.remote_path, archive_name)

    def describe(self, archive_name: str) -> str:
        return f"ftp://{self.host}{self.remote_file(archive_name)}"

    def open(self) -> FtpSession:
        """Connect and read the remote listing unless a session is already open."""
        if self._session is None:
            session = self._session_factory(self.host)
            try:
                session.open()
                sizes = session.list_sizes(self.remote_path)
            except BaseException:
                session.close()
                raise
            self._session = session
            self._file_sizes = sizes
            logger.info(f"Listed {len(sizes)} files in ftp://{self.host}{self.remote_path}")
        return self._session

    def fetch(self, archive_path: Path) -> FetchOutcome:
        archive_name = archive_path.name

        try:
            session = self.open()
        except Exception as e:
            message = ErrorMessages.FTP_CONNECT_FAILED.format(self.host, e)
            if is_socket_error(e):
                logger.error(message)
                return FetchOutcome.fatal(message, error=e)
            logger.warning(message)
            return FetchOutcome.recoverable(message, error=e)

        sizes = self._file_sizes or {}
        if archive_name not in sizes:
            logger.warning(f"{archive_name} not listed on ftp://{self.host}{self.remote_path}")
            return FetchOutcome.absent(f"{archive_name} not found on {self.host}")

        remote_file = self.remote_file(archive_name)
        logger.info(f"ftp retrieving {self.describe(archive_name)}")
        try:
            status = session.retrieve_file(remote_file, archive_path, sizes.get(archive_name))
        except Exception as e:
            self.close()
            archive_path.unlink(missing_ok=True)
            if is_socket_error(e):
                message = ErrorMessages.FTP_CONNECTION_LOST.format(self.host, e)
                logger.error(message)
                return FetchOutcome.fatal(message, error=e)
            message = ErrorMessages.FTP_RETRIEVE_FAILED.format(remote_file, e)
            logger.warning(message)
            return FetchOutcome.recoverable(message, error=e)

        if status is FtpStatus.OK:
            return FetchOutcome.success(archive_path)

        archive_path.unlink(missing_ok=True)
        if status is FtpStatus.FILE_NOT_FOUND:
            logger.warning(f"{remote_file} not found on {self.host}")
            return FetchOutcome.absent(f"{archive_name} not found on {self.host}")

        # Force a reconnect on the next attempt
        self.close()
        message = ErrorMessages.FTP_RETRIEVE_FAILED.format(remote_file, status.value)
        logger.warning(message)
        return FetchOutcome.recoverable(message)

    def close(self) -> None:
        session, self._session = self._session, None
        self._file_sizes = None
        if session is not None:
            session.close()
