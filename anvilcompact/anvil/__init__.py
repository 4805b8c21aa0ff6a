"""Anvil region container: directories of ``r.<x>.<z>.mca`` files.

Only what compaction needs: enumerate regions and chunk slots, read raw
records, write raw records. Records pass through compressed.
"""

from anvilcompact.anvil.chunk import (
    COMPRESSION_GZIP,
    COMPRESSION_NONE,
    COMPRESSION_ZLIB,
    ChunkData,
)
from anvilcompact.anvil.container import AnvilRegion
from anvilcompact.anvil.coords import ChunkCoordinate, RegionCoordinate
from anvilcompact.anvil.region import RegionFile

__all__ = [
    "AnvilRegion",
    "COMPRESSION_GZIP",
    "COMPRESSION_NONE",
    "COMPRESSION_ZLIB",
    "ChunkCoordinate",
    "ChunkData",
    "RegionCoordinate",
    "RegionFile",
]
