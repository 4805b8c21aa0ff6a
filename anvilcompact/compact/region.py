"""Rewrite region containers: primary chunks first, then per-chunk metadata."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from anvilcompact.anvil import AnvilRegion, ChunkCoordinate
from anvilcompact.compact.backup import BACKUP_SUFFIX, BackupSwap, swap_to_backup
from anvilcompact.compact.copier import (
    CopyStats,
    copy_chunks,
    retain_all,
    retain_members,
    retain_non_empty,
)
from anvilcompact.errors import NotADirectory

log = logging.getLogger(__name__)


@dataclass
class CompactResult:
    """Outcome of rewriting one container."""

    path: Path
    backup: Path
    stats: CopyStats

    @property
    def retained(self) -> set[ChunkCoordinate]:
        return self.stats.retained


@contextmanager
def _rewrite(path: Path, suffix: str) -> Iterator[tuple[BackupSwap, AnvilRegion, AnvilRegion]]:
    """Swap ``path`` to its backup and yield (swap, source, destination).

    Both containers are closed when the block exits, normally or not.
    """
    path = Path(path)
    if not path.is_dir():
        raise NotADirectory(path)
    swap = swap_to_backup(path, suffix=suffix)
    with AnvilRegion.open(swap.backup) as source, AnvilRegion.open(swap.target) as destination:
        yield swap, source, destination


def compact_region(
    path: Path,
    avoid_empty_chunks: bool = True,
    *,
    backup_suffix: str = BACKUP_SUFFIX,
) -> CompactResult:
    """Rewrite the primary chunk container, optionally dropping empty chunks.

    With ``avoid_empty_chunks`` off every present chunk is copied and the
    emptiness policy is never consulted (pure defragmentation).

    Returns
    -------
    CompactResult
        ``retained`` is the authoritative set of surviving chunks.
    """
    content = retain_non_empty if avoid_empty_chunks else retain_all
    with _rewrite(path, backup_suffix) as (swap, source, destination):
        stats = copy_chunks(source, destination, content=content)
    log.info(
        "%s: kept %d of %d chunks (%d empty dropped, %d unreadable skipped)",
        swap.target.name, stats.written, stats.present, stats.filtered, stats.corrupt,
    )
    return CompactResult(path=swap.target, backup=swap.backup, stats=stats)


def compact_metadata(
    path: Path,
    retained: set[ChunkCoordinate],
    *,
    backup_suffix: str = BACKUP_SUFFIX,
) -> CompactResult:
    """Rewrite an auxiliary container keeping only chunks in ``retained``.

    Payloads are never decoded here; retention is decided by coordinate
    alone.
    """
    with _rewrite(path, backup_suffix) as (swap, source, destination):
        stats = copy_chunks(source, destination, membership=retain_members(retained))
    log.info(
        "%s: kept %d records for surviving chunks (%d unreadable skipped)",
        swap.target.name, stats.written, stats.corrupt,
    )
    return CompactResult(path=swap.target, backup=swap.backup, stats=stats)
