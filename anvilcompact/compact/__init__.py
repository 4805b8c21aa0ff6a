"""Compaction subsystem: drop empty chunks and rewrite containers.

The primary chunk container is rewritten first under the emptiness
policy; the set of chunks it keeps then filters every metadata container.
Each rewrite moves the original aside to a ``.bak`` sibling first.
"""

from anvilcompact.compact.backup import BackupSwap, backup_path, swap_to_backup
from anvilcompact.compact.copier import (
    CopyStats,
    copy_chunks,
    retain_all,
    retain_members,
    retain_non_empty,
)
from anvilcompact.compact.player import scrub_player_data
from anvilcompact.compact.policy import (
    LegacySchema,
    ModernSchema,
    UnknownSchema,
    classify,
    is_empty,
)
from anvilcompact.compact.region import CompactResult, compact_metadata, compact_region
from anvilcompact.compact.scan import ScanReport, scan_region
from anvilcompact.compact.world import WorldCompactReport, compact_world, primary_dir

__all__ = [
    "BackupSwap",
    "CompactResult",
    "CopyStats",
    "LegacySchema",
    "ModernSchema",
    "ScanReport",
    "UnknownSchema",
    "WorldCompactReport",
    "backup_path",
    "classify",
    "compact_metadata",
    "compact_region",
    "compact_world",
    "copy_chunks",
    "is_empty",
    "primary_dir",
    "retain_all",
    "retain_members",
    "retain_non_empty",
    "scan_region",
    "scrub_player_data",
    "swap_to_backup",
]
