"""Single Anvil region file (``r.<x>.<z>.mca``).

Layout: an 8 KiB header of two 1024-entry big-endian tables (location,
then timestamp) followed by 4 KiB sectors. A location entry packs a 3-byte
sector offset and a 1-byte sector count. Each record starts with a 4-byte
length (covering the compression byte and payload) and a 1-byte compression
id. When bit 0x80 of the compression id is set, the payload lives in a
sibling ``c.<x>.<z>.mcc`` file instead.
"""

from __future__ import annotations

import logging
import math
import struct
import time
from pathlib import Path
from typing import BinaryIO

from anvilcompact.anvil.chunk import ChunkData
from anvilcompact.anvil.coords import (
    CHUNKS_PER_REGION,
    ChunkCoordinate,
    RegionCoordinate,
)
from anvilcompact.errors import RecordReadFailure

log = logging.getLogger(__name__)

SECTOR_SIZE = 4096
HEADER_SECTORS = 2
HEADER_SIZE = HEADER_SECTORS * SECTOR_SIZE
MAX_SECTOR_COUNT = 255
EXTERNAL_FLAG = 0x80

_TABLE = struct.Struct(f">{CHUNKS_PER_REGION}I")
_ENTRY = struct.Struct(">I")
_RECORD_HEADER = struct.Struct(">IB")


class RegionFile:
    """Reader/writer for one region file.

    The file is opened read-only until the first :meth:`write`, at which
    point it is reopened for update (or created with an empty header).
    Records are written in place when they fit their old sectors and
    appended otherwise; freed sectors are not reused.
    """

    def __init__(self, path: Path, coord: RegionCoordinate) -> None:
        self.path = path
        self.coord = coord
        self._fh: BinaryIO | None = None
        self._writable = False
        self._locations: list[int] = [0] * CHUNKS_PER_REGION
        self._timestamps: list[int] = [0] * CHUNKS_PER_REGION
        self._next_sector = HEADER_SECTORS

        if path.exists():
            self._fh = open(path, "rb")
            self._load_header()

    def _load_header(self) -> None:
        assert self._fh is not None
        header = self._fh.read(HEADER_SIZE)
        if len(header) < HEADER_SIZE:
            # Minecraft leaves zero-length region files behind; they hold nothing.
            log.debug("Region file %s has no header, treating as empty", self.path)
            self._locations = [0] * CHUNKS_PER_REGION
            return
        self._locations = list(_TABLE.unpack_from(header, 0))
        self._timestamps = list(_TABLE.unpack_from(header, SECTOR_SIZE))
        for entry in self._locations:
            offset, count = entry >> 8, entry & 0xFF
            if offset >= HEADER_SECTORS:
                self._next_sector = max(self._next_sector, offset + count)

    def _index(self, coord: ChunkCoordinate) -> int:
        if coord.region != self.coord:
            raise ValueError(f"Chunk {coord} does not belong to region {self.coord}")
        return coord.local_index

    def has_chunk(self, coord: ChunkCoordinate) -> bool:
        return self._locations[self._index(coord)] != 0

    def present_chunks(self) -> list[ChunkCoordinate]:
        """Chunk slots with a non-empty location entry."""
        return [c for c in self.coord.chunks() if self._locations[c.local_index] != 0]

    def read(self, coord: ChunkCoordinate) -> ChunkData | None:
        """Read the raw record for ``coord``; None when the slot is empty."""
        index = self._index(coord)
        entry = self._locations[index]
        if entry == 0 or self._fh is None:
            return None

        offset, count = entry >> 8, entry & 0xFF
        if offset < HEADER_SECTORS or count == 0:
            raise RecordReadFailure(f"chunk {coord}: bad location entry {entry:#010x}")

        self._fh.seek(offset * SECTOR_SIZE)
        header = self._fh.read(_RECORD_HEADER.size)
        if len(header) < _RECORD_HEADER.size:
            raise RecordReadFailure(f"chunk {coord}: record header past end of file")
        length, compression = _RECORD_HEADER.unpack(header)
        if length == 0:
            raise RecordReadFailure(f"chunk {coord}: zero-length record")

        timestamp = self._timestamps[index]
        if compression & EXTERNAL_FLAG:
            external = self.path.parent / coord.external_filename
            try:
                payload = external.read_bytes()
            except FileNotFoundError as exc:
                raise RecordReadFailure(f"chunk {coord}: missing {external.name}") from exc
            return ChunkData(compression & ~EXTERNAL_FLAG, payload, timestamp)

        if length - 1 > count * SECTOR_SIZE - _RECORD_HEADER.size:
            raise RecordReadFailure(
                f"chunk {coord}: length {length} exceeds {count} allocated sectors"
            )
        payload = self._fh.read(length - 1)
        if len(payload) < length - 1:
            raise RecordReadFailure(f"chunk {coord}: truncated record")
        return ChunkData(compression, payload, timestamp)

    def write(self, coord: ChunkCoordinate, chunk: ChunkData) -> None:
        """Store ``chunk`` at ``coord`` without altering its bytes."""
        index = self._index(coord)
        self._ensure_writable()
        assert self._fh is not None

        external = self.path.parent / coord.external_filename
        sectors = math.ceil((len(chunk.data) + _RECORD_HEADER.size) / SECTOR_SIZE)
        if sectors > MAX_SECTOR_COUNT:
            external.write_bytes(chunk.data)
            body = _RECORD_HEADER.pack(1, chunk.compression | EXTERNAL_FLAG)
            sectors = 1
        else:
            if external.exists():
                external.unlink()
            body = _RECORD_HEADER.pack(len(chunk.data) + 1, chunk.compression) + chunk.data

        entry = self._locations[index]
        offset, count = entry >> 8, entry & 0xFF
        if offset < HEADER_SECTORS or sectors > count:
            offset = self._next_sector
            self._next_sector += sectors

        self._fh.seek(offset * SECTOR_SIZE)
        self._fh.write(body.ljust(sectors * SECTOR_SIZE, b"\0"))

        timestamp = chunk.timestamp or int(time.time())
        self._locations[index] = (offset << 8) | sectors
        self._timestamps[index] = timestamp
        self._fh.seek(index * _ENTRY.size)
        self._fh.write(_ENTRY.pack(self._locations[index]))
        self._fh.seek(SECTOR_SIZE + index * _ENTRY.size)
        self._fh.write(_ENTRY.pack(timestamp))

    def _ensure_writable(self) -> None:
        if self._writable:
            return
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        if self.path.exists() and self.path.stat().st_size >= HEADER_SIZE:
            self._fh = open(self.path, "r+b")
        else:
            self._fh = open(self.path, "w+b")
            self._fh.write(bytes(HEADER_SIZE))
            self._locations = [0] * CHUNKS_PER_REGION
            self._timestamps = [0] * CHUNKS_PER_REGION
            self._next_sector = HEADER_SECTORS
        self._writable = True

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        self._writable = False
