"""Stream chunks from one container into another under optional filters.

Records are copied byte-for-byte; compaction only ever omits records, it
never re-encodes them. Two independent hooks decide what is omitted:

``membership(coord)``
    Checked before anything is read. False skips the slot.
``content(coord, chunk)``
    Checked after the record is read. May decode the payload.

Either hook may be None, in which case that stage always passes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from anvilcompact.anvil import AnvilRegion, ChunkCoordinate, ChunkData
from anvilcompact.compact.policy import is_empty
from anvilcompact.errors import RecordReadFailure, UnsupportedCompression

log = logging.getLogger(__name__)

MembershipFilter = Callable[[ChunkCoordinate], bool]
ContentFilter = Callable[[ChunkCoordinate, ChunkData], bool]


@dataclass
class CopyStats:
    """Counters and the retained-coordinate set from one copy pass."""

    retained: set[ChunkCoordinate] = field(default_factory=set)
    examined: int = 0
    present: int = 0
    filtered: int = 0
    corrupt: int = 0

    @property
    def written(self) -> int:
        return len(self.retained)


def copy_chunks(
    source: AnvilRegion,
    destination: AnvilRegion,
    membership: MembershipFilter | None = None,
    content: ContentFilter | None = None,
) -> CopyStats:
    """Copy every surviving chunk from ``source`` to ``destination``.

    Every addressable slot of every region in ``source`` is visited,
    including empty ones. Unreadable or undecodable records are logged and
    skipped; they never abort the copy.

    Returns
    -------
    CopyStats
        ``retained`` holds exactly the coordinates written to ``destination``.
    """
    stats = CopyStats()
    for region in source.regions():
        for coord in source.chunks(region, include_empty=True):
            stats.examined += 1
            if membership is not None and not membership(coord):
                continue
            try:
                chunk = source.read(coord)
                if chunk is None:
                    continue
                stats.present += 1
                if content is not None and not content(coord, chunk):
                    stats.filtered += 1
                    continue
            except RecordReadFailure as exc:
                stats.corrupt += 1
                log.warning("Skipping unreadable chunk %s in %s: %s", coord, source.path.name, exc)
                continue
            destination.write(coord, chunk)
            stats.retained.add(coord)
    return stats


def retain_all(coord: ChunkCoordinate, chunk: ChunkData) -> bool:
    """Content filter that keeps every present chunk without decoding it."""
    return True


def retain_non_empty(coord: ChunkCoordinate, chunk: ChunkData) -> bool:
    """Content filter that drops chunks the emptiness policy calls empty.

    Chunks in a compression scheme we cannot read are kept, since their
    emptiness cannot be proven.
    """
    try:
        payload = chunk.decode()
    except UnsupportedCompression as exc:
        log.warning("Keeping chunk %s undecoded: %s", coord, exc)
        return True
    if is_empty(payload):
        log.debug("Dropping empty chunk %s", coord)
        return False
    return True


def retain_members(coords: Collection[ChunkCoordinate]) -> MembershipFilter:
    """Membership filter passing only coordinates in ``coords``."""

    def _member(coord: ChunkCoordinate) -> bool:
        return coord in coords

    return _member
