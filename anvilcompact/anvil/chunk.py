"""Raw chunk records as stored in region files."""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass, field
from typing import Any

from anvilcompact.errors import RecordReadFailure, UnsupportedCompression
from anvilcompact.nbt import decode as decode_nbt

COMPRESSION_GZIP = 1
COMPRESSION_ZLIB = 2
COMPRESSION_NONE = 3
COMPRESSION_LZ4 = 4
COMPRESSION_CUSTOM = 127


@dataclass(eq=True)
class ChunkData:
    """One stored chunk: compression scheme id plus the compressed bytes.

    The bytes are carried through compaction untouched. Decompression and
    tag-tree decoding happen only on demand, and the decoded tree is cached
    so a record is decoded at most once.
    """

    compression: int
    data: bytes
    timestamp: int = 0
    _tree: Any = field(default=None, init=False, repr=False, compare=False)

    def decompressed(self) -> bytes:
        """Return the uncompressed payload.

        Raises :class:`UnsupportedCompression` for schemes we cannot read
        (LZ4, custom) and :class:`RecordReadFailure` for corrupt streams.
        """
        try:
            if self.compression == COMPRESSION_GZIP:
                return gzip.decompress(self.data)
            if self.compression == COMPRESSION_ZLIB:
                return zlib.decompress(self.data)
        except (OSError, EOFError, zlib.error) as exc:
            raise RecordReadFailure(f"corrupt compressed stream: {exc}") from exc
        if self.compression == COMPRESSION_NONE:
            return self.data
        raise UnsupportedCompression(self.compression)

    def decode(self) -> Any:
        """Decode the payload into an NBT compound (cached)."""
        if self._tree is None:
            self._tree = decode_nbt(self.decompressed())
        return self._tree
