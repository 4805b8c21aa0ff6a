"""Clear the embedded single-player state from ``level.dat``."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

import nbtlib

from anvilcompact.compact.backup import BACKUP_SUFFIX, swap_to_backup
from anvilcompact.nbt import load_file, save_file

log = logging.getLogger(__name__)


def _player_holder(level: nbtlib.File) -> MutableMapping[str, Any] | None:
    """Return the compound that directly contains ``Player``, if any.

    ``level.dat`` keeps it under ``Data``; a root-level ``Player`` is
    accepted too.
    """
    data = level.get("Data")
    if isinstance(data, MutableMapping) and "Player" in data:
        return data
    if "Player" in level:
        return level
    return None


def scrub_player_data(path: Path, *, backup_suffix: str = BACKUP_SUFFIX) -> bool:
    """Replace the ``Player`` compound in ``path`` with an empty one.

    Returns False, touching nothing, when there is no player data to clear.
    Otherwise the original file is kept as ``<name><backup_suffix>`` and
    the scrubbed tree is written back to ``path``.

    Raises
    ------
    BackupAlreadyExists
        If a backup from an earlier run is still present.
    """
    path = Path(path)
    level = load_file(path)
    holder = _player_holder(level)
    if holder is None:
        log.info("%s: no Player compound, nothing to clear", path.name)
        return False
    player = holder["Player"]
    if not isinstance(player, MutableMapping) or len(player) == 0:
        log.info("%s: Player compound already empty", path.name)
        return False

    swap = swap_to_backup(path, suffix=backup_suffix)
    holder["Player"] = nbtlib.Compound()
    save_file(level, swap.target)
    log.info("%s: cleared Player compound (%d fields)", path.name, len(player))
    return True
