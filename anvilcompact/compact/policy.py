"""Decide whether a decoded chunk holds nothing worth keeping.

Chunk payloads come in several historical layouts. Each recognised layout
is a variant with its own emptiness rule; anything unrecognised falls into
:class:`UnknownSchema`, which is never empty. New layouts get a new variant
checked before the fallback.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from nbtlib import LongArray

AIR = "minecraft:air"


@dataclass(frozen=True)
class LegacySchema:
    """1.8 - 1.17 chunks: everything lives under a top-level ``Level``."""

    kind: ClassVar[str] = "legacy"
    level: Any

    def is_empty(self) -> bool:
        if not isinstance(self.level, Mapping) or "Sections" not in self.level:
            # No section list to inspect; keep it.
            return False
        sections = self.level["Sections"]
        return _is_list(sections) and len(sections) == 0


@dataclass(frozen=True)
class ModernSchema:
    """1.18+ chunks: top-level ``sections`` with paletted ``block_states``."""

    kind: ClassVar[str] = "modern"
    sections: Any

    def is_empty(self) -> bool:
        return all(_section_is_air(section) for section in self.sections)


@dataclass(frozen=True)
class UnknownSchema:
    """Any other layout. Never classified empty."""

    kind: ClassVar[str] = "unknown"

    def is_empty(self) -> bool:
        return False


ChunkSchema = Union[LegacySchema, ModernSchema, UnknownSchema]


def _is_list(value: Any) -> bool:
    """List tags (and plain lists). Strings and byte arrays do not count."""
    return isinstance(value, list)


def _section_is_air(section: Any) -> bool:
    """True iff the section's palette is exactly air with no packed data."""
    if not isinstance(section, Mapping):
        return False
    block_states = section.get("block_states")
    if not isinstance(block_states, Mapping):
        return False
    palette = block_states.get("palette")
    if not _is_list(palette) or len(palette) != 1:
        return False
    entry = palette[0]
    if not isinstance(entry, Mapping) or entry.get("Name") != AIR:
        return False
    data = block_states.get("data")
    if data is None:
        return True
    # Packed block indices are a LongArray; any other tag is malformed.
    return isinstance(data, (LongArray, list)) and len(data) == 0


def classify(payload: Mapping[str, Any]) -> ChunkSchema:
    """Pick the schema variant for a decoded chunk. ``Level`` wins over ``sections``."""
    if "Level" in payload:
        return LegacySchema(payload["Level"])
    if "sections" in payload:
        sections = payload["sections"]
        if not _is_list(sections):
            return UnknownSchema()
        return ModernSchema(sections)
    return UnknownSchema()


def is_empty(payload: Mapping[str, Any]) -> bool:
    """True when the chunk can be dropped without losing world content."""
    return classify(payload).is_empty()
