"""Tests for anvilcompact.compact.player: level.dat scrubbing."""

from __future__ import annotations

import gzip
from pathlib import Path

import nbtlib
import pytest
from nbtlib import Compound, Float, String

from anvilcompact.compact.player import scrub_player_data
from anvilcompact.errors import BackupAlreadyExists, RecordReadFailure
from worldgen import sample_player, write_level_dat


@pytest.fixture
def level_dat(tmp_path: Path) -> Path:
    path = tmp_path / "level.dat"
    write_level_dat(path, sample_player())
    return path


class TestScrubPlayerData:
    def test_clears_player(self, level_dat: Path) -> None:
        assert scrub_player_data(level_dat) is True

        level = nbtlib.load(level_dat)
        assert level["Data"]["Player"] == {}
        assert level["Data"]["LevelName"] == "Test World"

    def test_output_stays_gzipped(self, level_dat: Path) -> None:
        scrub_player_data(level_dat)
        assert level_dat.read_bytes()[:2] == b"\x1f\x8b"

    def test_backup_is_original(self, level_dat: Path) -> None:
        original = level_dat.read_bytes()
        scrub_player_data(level_dat)
        assert (level_dat.parent / "level.dat.bak").read_bytes() == original

    def test_empty_player_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "level.dat"
        write_level_dat(path, Compound())
        original = path.read_bytes()

        assert scrub_player_data(path) is False

        assert path.read_bytes() == original
        assert not (tmp_path / "level.dat.bak").exists()

    def test_missing_player_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "level.dat"
        write_level_dat(path, None)
        assert scrub_player_data(path) is False
        assert not (tmp_path / "level.dat.bak").exists()

    def test_empty_player_ignores_stale_backup(self, tmp_path: Path) -> None:
        path = tmp_path / "level.dat"
        write_level_dat(path, Compound())
        (tmp_path / "level.dat.bak").write_bytes(b"old")
        assert scrub_player_data(path) is False

    def test_refuses_existing_backup(self, level_dat: Path) -> None:
        (level_dat.parent / "level.dat.bak").write_bytes(b"old")
        original = level_dat.read_bytes()

        with pytest.raises(BackupAlreadyExists):
            scrub_player_data(level_dat)

        assert level_dat.read_bytes() == original
        assert (level_dat.parent / "level.dat.bak").read_bytes() == b"old"

    def test_second_scrub_is_noop(self, level_dat: Path) -> None:
        scrub_player_data(level_dat)
        (level_dat.parent / "level.dat.bak").unlink()
        assert scrub_player_data(level_dat) is False
        assert not (level_dat.parent / "level.dat.bak").exists()

    def test_root_level_player(self, tmp_path: Path) -> None:
        path = tmp_path / "level.dat"
        nbtlib.File(
            {"Player": Compound({"Health": Float(1.0)}), "Name": String("x")},
            gzipped=True,
        ).save(path)

        assert scrub_player_data(path) is True
        level = nbtlib.load(path)
        assert level["Player"] == {}
        assert level["Name"] == "x"

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "level.dat"
        path.write_bytes(b"\x0a\x00")
        with pytest.raises(RecordReadFailure):
            scrub_player_data(path)

    def test_truncated_gzipped_file(self, level_dat: Path, tmp_path: Path) -> None:
        raw = gzip.decompress(level_dat.read_bytes())
        level_dat.write_bytes(gzip.compress(raw[:-6]))
        with pytest.raises(RecordReadFailure, match="malformed NBT file"):
            scrub_player_data(level_dat)
        assert not (tmp_path / "level.dat.bak").exists()

    def test_corrupt_gzip_stream(self, level_dat: Path) -> None:
        level_dat.write_bytes(level_dat.read_bytes()[:20])
        with pytest.raises(RecordReadFailure, match="corrupt gzip stream"):
            scrub_player_data(level_dat)
