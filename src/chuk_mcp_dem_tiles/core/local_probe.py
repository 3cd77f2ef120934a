"""Local storage probe for a tile's plain file and archive sibling."""

from dataclasses import dataclass
from pathlib import Path

from ..constants import DEFAULT_ARCHIVE_TEMPLATE


@dataclass(frozen=True)
class LocalCacheProbe:
    """Existence checks for one tile on local storage.

    The archive path is always derived from the plain path: same directory,
    name built from the plain file's stem with ``archive_template``
    (``N46E007.hgt`` -> ``N46E007.SRTMGL1.hgt.zip`` for ``"{stem}.SRTMGL1.hgt.zip"``).
    """

    plain_path: Path
    archive_template: str = DEFAULT_ARCHIVE_TEMPLATE

    @property
    def archive_path(self) -> Path:
        return self.plain_path.with_name(self.archive_template.format(stem=self.plain_path.stem))

    def plain_exists(self) -> bool:
        return self.plain_path.is_file()

    def archive_exists(self) -> bool:
        return self.archive_path.is_file()

    def exists(self) -> bool:
        return self.plain_exists() or self.archive_exists()

    def locate(self) -> Path | None:
        """The local copy to decode, preferring the plain file."""
        if self.plain_exists():
            return self.plain_path
        if self.archive_exists():
            return self.archive_path
        return None

    def remove_archive(self) -> None:
        """Delete a (possibly partial) local archive if present."""
        self.archive_path.unlink(missing_ok=True)
