"""Backup-then-rewrite guard.

Before a container is rewritten, the original is renamed to a sibling
``<name>.bak``. The original data is never deleted by this tool; the
backup stays until an operator verifies the new file and removes it. A
backup that is still present means an earlier run did not finish, so any
new attempt on the same path is refused.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from anvilcompact.errors import BackupAlreadyExists

log = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


@dataclass(frozen=True)
class BackupSwap:
    """Result of a successful swap: read from ``backup``, write to ``target``."""

    target: Path
    backup: Path


def backup_path(target: Path, suffix: str = BACKUP_SUFFIX) -> Path:
    """Sibling backup path for ``target`` (``region`` -> ``region.bak``)."""
    return target.with_name(target.name + suffix)


def swap_to_backup(target: Path, *, suffix: str = BACKUP_SUFFIX) -> BackupSwap:
    """Rename ``target`` to its backup path.

    Parameters
    ----------
    target:
        File or directory about to be rewritten.
    suffix:
        Backup suffix appended to the target's name.

    Returns
    -------
    BackupSwap
        The target path (now free) and the backup holding the original.

    Raises
    ------
    BackupAlreadyExists
        If the backup path is already taken, even by a dangling symlink.
    OSError
        Propagated unchanged from the rename; nothing is created at
        ``target`` in that case.
    """
    target = Path(target)
    backup = backup_path(target, suffix)
    if os.path.lexists(backup):
        raise BackupAlreadyExists(backup)
    # os.rename, not shutil.move: a cross-device move must fail, not copy.
    os.rename(target, backup)
    log.info("Moved %s -> %s", target, backup.name)
    return BackupSwap(target=target, backup=backup)
