"""Tests for LocalCacheProbe."""

from pathlib import Path

import pytest

from chuk_mcp_dem_tiles.core.local_probe import LocalCacheProbe


@pytest.fixture
def probe(tmp_path):
    return LocalCacheProbe(tmp_path / "srtm_38_03.tif")


class TestArchivePath:
    def test_derived_from_plain_path(self, tmp_path):
        probe = LocalCacheProbe(tmp_path / "N46E007.hgt")
        assert probe.archive_path == tmp_path / "N46E007.zip"

    def test_only_last_extension_replaced(self):
        probe = LocalCacheProbe(Path("/data/N46E007.SRTMGL1.hgt"))
        assert probe.archive_path == Path("/data/N46E007.SRTMGL1.zip")

    def test_archive_template(self, tmp_path):
        probe = LocalCacheProbe(tmp_path / "N46E007.hgt", "{stem}.SRTMGL1.hgt.zip")
        assert probe.archive_path == tmp_path / "N46E007.SRTMGL1.hgt.zip"
        assert probe.plain_path.name == "N46E007.hgt"

    def test_archive_template_probed(self, tmp_path):
        probe = LocalCacheProbe(tmp_path / "N46E007.hgt", "{stem}.SRTMGL1.hgt.zip")
        (tmp_path / "N46E007.zip").write_bytes(b"other layout")
        assert probe.exists() is False
        (tmp_path / "N46E007.SRTMGL1.hgt.zip").write_bytes(b"zip")
        assert probe.locate() == tmp_path / "N46E007.SRTMGL1.hgt.zip"

    def test_cannot_be_set(self, probe):
        with pytest.raises(AttributeError):
            probe.archive_path = Path("/elsewhere.zip")


class TestExists:
    def test_nothing_present(self, probe):
        assert probe.exists() is False
        assert probe.locate() is None

    def test_plain_file_present(self, probe):
        probe.plain_path.write_bytes(b"x")
        assert probe.exists() is True
        assert probe.locate() == probe.plain_path

    def test_archive_present(self, probe):
        probe.archive_path.write_bytes(b"x")
        assert probe.exists() is True
        assert probe.locate() == probe.archive_path

    def test_plain_preferred_over_archive(self, probe):
        probe.plain_path.write_bytes(b"x")
        probe.archive_path.write_bytes(b"x")
        assert probe.locate() == probe.plain_path

    def test_directory_is_not_a_tile(self, probe):
        probe.plain_path.mkdir()
        assert probe.plain_exists() is False


class TestRemoveArchive:
    def test_removes_partial(self, probe):
        probe.archive_path.write_bytes(b"partial")
        probe.remove_archive()
        assert not probe.archive_path.exists()

    def test_missing_archive_is_fine(self, probe):
        probe.remove_archive()
        assert not probe.archive_path.exists()
