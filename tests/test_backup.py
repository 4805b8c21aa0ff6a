"""Tests for anvilcompact.compact.backup: the backup-swap guard."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from anvilcompact.compact.backup import backup_path, swap_to_backup
from anvilcompact.errors import BackupAlreadyExists


class TestBackupPath:
    def test_sibling_with_suffix(self, tmp_path: Path) -> None:
        assert backup_path(tmp_path / "region") == tmp_path / "region.bak"
        assert backup_path(tmp_path / "level.dat") == tmp_path / "level.dat.bak"

    def test_custom_suffix(self, tmp_path: Path) -> None:
        assert backup_path(tmp_path / "poi", ".orig") == tmp_path / "poi.orig"


class TestSwapToBackup:
    def test_renames_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "region"
        target.mkdir()
        (target / "r.0.0.mca").write_bytes(b"data")

        swap = swap_to_backup(target)

        assert swap.target == target
        assert swap.backup == tmp_path / "region.bak"
        assert not target.exists()
        assert (swap.backup / "r.0.0.mca").read_bytes() == b"data"

    def test_renames_file(self, tmp_path: Path) -> None:
        target = tmp_path / "level.dat"
        target.write_bytes(b"nbt")
        swap = swap_to_backup(target)
        assert swap.backup.read_bytes() == b"nbt"
        assert not target.exists()

    def test_refuses_existing_backup(self, tmp_path: Path) -> None:
        target = tmp_path / "region"
        target.mkdir()
        (tmp_path / "region.bak").mkdir()

        with pytest.raises(BackupAlreadyExists) as info:
            swap_to_backup(target)

        assert info.value.backup == tmp_path / "region.bak"
        assert target.is_dir()

    def test_dangling_symlink_counts_as_backup(self, tmp_path: Path) -> None:
        target = tmp_path / "region"
        target.mkdir()
        os.symlink(tmp_path / "nowhere", tmp_path / "region.bak")
        with pytest.raises(BackupAlreadyExists):
            swap_to_backup(target)
        assert target.is_dir()

    def test_rename_failure_propagates(self, tmp_path: Path) -> None:
        target = tmp_path / "region"
        target.mkdir()
        with patch("anvilcompact.compact.backup.os.rename", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError, match="denied"):
                swap_to_backup(target)
        assert target.is_dir()
        assert not (tmp_path / "region.bak").exists()

    def test_missing_target_propagates(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            swap_to_backup(tmp_path / "absent")
