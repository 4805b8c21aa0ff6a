"""Region and chunk coordinates."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Chunks per region along each axis
REGION_WIDTH = 32
CHUNKS_PER_REGION = REGION_WIDTH * REGION_WIDTH

_REGION_FILE_RE = re.compile(r'^r\.(-?\d+)\.(-?\d+)\.mca$')


@dataclass(frozen=True, order=True)
class RegionCoordinate:
    """Position of a 32x32 chunk region file (``r.<x>.<z>.mca``)."""

    x: int
    z: int

    @property
    def filename(self) -> str:
        return f"r.{self.x}.{self.z}.mca"

    @classmethod
    def from_filename(cls, name: str) -> RegionCoordinate | None:
        """Parse a region filename, returning None for anything else."""
        m = _REGION_FILE_RE.match(name)
        if not m:
            return None
        return cls(int(m.group(1)), int(m.group(2)))

    def chunks(self) -> list[ChunkCoordinate]:
        """Every chunk slot in this region, in offset-table order."""
        base_x = self.x * REGION_WIDTH
        base_z = self.z * REGION_WIDTH
        return [
            ChunkCoordinate(base_x + dx, base_z + dz)
            for dz in range(REGION_WIDTH)
            for dx in range(REGION_WIDTH)
        ]


@dataclass(frozen=True, order=True)
class ChunkCoordinate:
    """Absolute chunk position in the world grid."""

    x: int
    z: int

    @property
    def region(self) -> RegionCoordinate:
        return RegionCoordinate(self.x >> 5, self.z >> 5)

    @property
    def local_index(self) -> int:
        """Slot of this chunk in its region's offset table."""
        return (self.x & 31) + (self.z & 31) * REGION_WIDTH

    @property
    def external_filename(self) -> str:
        """Sibling file holding an oversized chunk (``c.<x>.<z>.mcc``)."""
        return f"c.{self.x}.{self.z}.mcc"

    def __str__(self) -> str:
        return f"({self.x}, {self.z})"
