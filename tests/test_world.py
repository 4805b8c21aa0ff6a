"""Tests for anvilcompact.compact.world: whole-world orchestration."""

from __future__ import annotations

from pathlib import Path

import nbtlib
import pytest

from anvilcompact.compact.world import compact_world
from anvilcompact.config import apply_overrides, load_config
from anvilcompact.errors import BackupAlreadyExists, MissingRequiredSubdirectory, NotADirectory
from worldgen import EMPTY_A, EMPTY_B, STONE_A, STONE_B, build_world, read_container


class TestCompactWorld:
    def test_full_pipeline(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        entities_before = read_container(world / "entities")

        report = compact_world(world)

        assert report.region.retained == {STONE_A, STONE_B}
        assert set(read_container(world / "region")) == {STONE_A, STONE_B}
        entities = read_container(world / "entities")
        assert set(entities) == {STONE_A, STONE_B}
        assert all(entities[c] == entities_before[c] for c in entities)
        assert set(read_container(world / "poi")) == {STONE_A}
        assert report.player_data_scrubbed is True
        assert nbtlib.load(world / "level.dat")["Data"]["Player"] == {}

    def test_reports_backups(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        report = compact_world(world)
        assert report.backups == [world / "region.bak", world / "entities.bak", world / "poi.bak"]
        assert all(p.is_dir() for p in report.backups)
        assert (world / "level.dat.bak").is_file()

    def test_metadata_never_exceeds_retained(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        report = compact_world(world)
        for result in report.metadata:
            assert result.retained <= report.region.retained

    def test_optional_dirs_absent(self, tmp_path: Path) -> None:
        world = build_world(tmp_path, entities=False, poi=False)
        report = compact_world(world)
        assert report.metadata == []
        assert not (world / "entities").exists()
        assert not (world / "poi").exists()

    def test_keep_empty_chunks(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        config = apply_overrides(load_config(), {"avoid_empty_chunks": False})
        report = compact_world(world, config)
        assert report.region.retained == {STONE_A, STONE_B, EMPTY_A, EMPTY_B}
        assert set(read_container(world / "entities")) == {STONE_A, STONE_B, EMPTY_A, EMPTY_B}

    def test_player_data_disabled(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        config = apply_overrides(load_config(), {"player_data": {"enabled": False}})
        report = compact_world(world, config)
        assert report.player_data_scrubbed is False
        assert not (world / "level.dat.bak").exists()

    def test_missing_level_dat(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        (world / "level.dat").unlink()
        report = compact_world(world)
        assert report.player_data_scrubbed is False

    def test_not_a_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "world.zip"
        target.write_bytes(b"")
        with pytest.raises(NotADirectory):
            compact_world(target)

    def test_missing_region_dir(self, tmp_path: Path) -> None:
        world = tmp_path / "world"
        (world / "entities").mkdir(parents=True)
        with pytest.raises(MissingRequiredSubdirectory, match="region"):
            compact_world(world)
        assert not (world / "entities.bak").exists()

    def test_metadata_failure_keeps_region_rewrite(self, tmp_path: Path) -> None:
        world = build_world(tmp_path)
        (world / "poi.bak").mkdir()

        with pytest.raises(BackupAlreadyExists):
            compact_world(world)

        # Region and entities were already rewritten; poi and level.dat untouched.
        assert set(read_container(world / "region")) == {STONE_A, STONE_B}
        assert (world / "region.bak").is_dir()
        assert set(read_container(world / "entities")) == {STONE_A, STONE_B}
        assert len(read_container(world / "poi")) == 2
        assert not (world / "level.dat.bak").exists()
