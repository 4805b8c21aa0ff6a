"""Thin wrapper over nbtlib for the tag trees stored in chunks and level.dat."""

from __future__ import annotations

import gzip
import io
import struct
import zlib
from pathlib import Path

import nbtlib

from anvilcompact.errors import RecordReadFailure

GZIP_MAGIC = b"\x1f\x8b"

# Errors nbtlib surfaces for malformed input
_PARSE_ERRORS = (EOFError, IndexError, KeyError, TypeError, ValueError, struct.error)


class _StrictReader(io.BytesIO):
    """BytesIO that refuses short reads.

    nbtlib reads a missing number as 0 and a missing string as empty, so a
    truncated blob would otherwise parse as a smaller tree.
    """

    def read(self, size: int | None = -1) -> bytes:
        data = super().read(size)
        if size is not None and size > 0 and len(data) < size:
            raise EOFError(f"wanted {size} bytes at offset {self.tell() - len(data)}, got {len(data)}")
        return data


def _parse(data: bytes, what: str) -> nbtlib.File:
    try:
        return nbtlib.File.from_fileobj(_StrictReader(data))
    except _PARSE_ERRORS as exc:
        raise RecordReadFailure(f"{what}: {exc}") from exc


def decode(data: bytes) -> nbtlib.File:
    """Decode an uncompressed, big-endian NBT blob into a compound."""
    return _parse(data, "malformed NBT payload")


def encode(tree: nbtlib.Compound, root_name: str = "") -> bytes:
    """Encode a compound into an uncompressed NBT blob."""
    buf = io.BytesIO()
    nbtlib.File(tree, root_name=root_name).write(buf)
    return buf.getvalue()


def load_file(path: Path) -> nbtlib.File:
    """Load a standalone NBT file, detecting gzip compression."""
    raw = Path(path).read_bytes()
    gzipped = raw[:2] == GZIP_MAGIC
    if gzipped:
        try:
            raw = gzip.decompress(raw)
        except (OSError, EOFError, zlib.error) as exc:
            raise RecordReadFailure(f"{path}: corrupt gzip stream: {exc}") from exc
    tree = _parse(raw, f"{path}: malformed NBT file")
    tree.filename = path
    tree.gzipped = gzipped
    return tree


def save_file(tree: nbtlib.File, path: Path) -> None:
    """Write a standalone NBT file, keeping its original compression."""
    tree.save(path)
