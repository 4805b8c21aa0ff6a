"""Compact a whole world directory: chunks, then metadata, then level.dat."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from anvilcompact.compact.player import scrub_player_data
from anvilcompact.compact.region import CompactResult, compact_metadata, compact_region
from anvilcompact.config import DEFAULTS
from anvilcompact.errors import MissingRequiredSubdirectory, NotADirectory

log = logging.getLogger(__name__)


@dataclass
class WorldCompactReport:
    """Per-container results of one world compaction."""

    world: Path
    region: CompactResult
    metadata: list[CompactResult] = field(default_factory=list)
    player_data_scrubbed: bool = False

    @property
    def backups(self) -> list[Path]:
        return [self.region.backup] + [r.backup for r in self.metadata]


def primary_dir(world: Path, config: dict) -> Path:
    """Validate the world layout and return its primary chunk directory."""
    world = Path(world)
    if not world.is_dir():
        raise NotADirectory(world)
    region = world / config["required_dir"]
    if not region.is_dir():
        raise MissingRequiredSubdirectory(world, config["required_dir"])
    return region


def compact_world(world: Path, config: dict | None = None) -> WorldCompactReport:
    """Run the full compaction pipeline over ``world``.

    The primary container is rewritten first; its surviving chunk set then
    drives every metadata container. ``level.dat`` is scrubbed last. The
    first failure aborts the run; containers already rewritten stay
    rewritten, with their backups in place.
    """
    config = config if config is not None else DEFAULTS
    world = Path(world)
    region_dir = primary_dir(world, config)
    suffix = config["backup_suffix"]

    log.info("Compacting %s", world)
    report = WorldCompactReport(
        world=world,
        region=compact_region(
            region_dir, config["avoid_empty_chunks"], backup_suffix=suffix,
        ),
    )

    for name in config["metadata_dirs"]:
        metadata_dir = world / name
        if not metadata_dir.is_dir():
            log.debug("No %s directory, skipping", name)
            continue
        report.metadata.append(
            compact_metadata(metadata_dir, report.region.retained, backup_suffix=suffix)
        )

    player = config["player_data"]
    level_dat = world / player["file"]
    if player["enabled"] and level_dat.is_file():
        report.player_data_scrubbed = scrub_player_data(level_dat, backup_suffix=suffix)
    return report
