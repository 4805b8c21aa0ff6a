"""Exception hierarchy for anvilcompact."""

from __future__ import annotations

from pathlib import Path


class CompactError(Exception):
    """Base class for every failure raised by anvilcompact."""


class NotADirectory(CompactError):
    """Raised when a path expected to be a directory is not one."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Target is not a directory: {path}")


class MissingRequiredSubdirectory(CompactError):
    """Raised when the world root lacks its primary region directory."""

    def __init__(self, world: Path, name: str) -> None:
        self.world = world
        self.name = name
        super().__init__(
            f"'{name}' directory does not exist in {world}; is this a Minecraft world?"
        )


class BackupAlreadyExists(CompactError):
    """Raised when a backup from an unfinished earlier run is still present."""

    def __init__(self, backup: Path) -> None:
        self.backup = backup
        super().__init__(
            f"Backup already exists: {backup}\n"
            "A previous run did not finish or was not cleaned up. "
            "Verify the rewritten data, then remove the backup and retry."
        )


class RecordReadFailure(CompactError):
    """A single record could not be read or decoded; callers skip it."""


class UnsupportedCompression(CompactError):
    """The record uses a compression scheme this tool cannot decompress."""

    def __init__(self, compression: int) -> None:
        self.compression = compression
        super().__init__(f"Unsupported chunk compression type {compression}")
