"""
Archive entry resolution for zipped tiles.

Tile archives are published with the payload under one of a few names:
the plain tile file name, its lowercase form, or nested in a folder named
after the archive itself.
"""

import logging
import zipfile
from pathlib import Path

from ..constants import ARCHIVE_EXTENSION, ErrorMessages
from .errors import MalformedArchiveError

logger = logging.getLogger(__name__)


def is_archive(path: Path) -> bool:
    """True if the path carries the archive extension (case-insensitive)."""
    return path.suffix.lower() == ARCHIVE_EXTENSION


class ArchiveEntryResolver:
    """Locate and read the payload entry of a tile archive."""

    def candidate_names(self, archive_path: Path, plain_name: str) -> list[str]:
        """Entry names to try, in resolution order."""
        return [
            plain_name,
            plain_name.lower(),
            f"{archive_path.stem}/{plain_name}",
        ]

    def resolve(self, archive: zipfile.ZipFile, archive_path: Path, plain_name: str) -> str:
        """
        Find the entry holding the tile payload.

        Args:
            archive: Open zip file
            archive_path: Path of the archive (its stem names the nested folder)
            plain_name: Base name of the plain tile file

        Returns:
            The matching entry name

        Raises:
            MalformedArchiveError: if no naming heuristic matches
        """
        names = set(archive.namelist())
        for candidate in self.candidate_names(archive_path, plain_name):
            if candidate in names:
                return candidate

        raise MalformedArchiveError(
            str(archive_path),
            plain_name,
            ErrorMessages.ENTRY_NOT_FOUND.format(plain_name, archive_path.name),
        )

    def read_entry(self, archive_path: Path, plain_name: str) -> bytes:
        """Read the tile payload out of a local archive."""
        if not is_archive(archive_path):
            raise ValueError(ErrorMessages.NOT_AN_ARCHIVE.format(archive_path))

        with zipfile.ZipFile(archive_path) as archive:
            entry = self.resolve(archive, archive_path, plain_name)
            logger.debug(f"Reading {entry} from {archive_path.name}")
            return archive.read(entry)
