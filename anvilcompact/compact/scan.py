"""Read-only survey of a chunk container."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from anvilcompact.anvil import AnvilRegion
from anvilcompact.compact.policy import classify
from anvilcompact.errors import NotADirectory, RecordReadFailure, UnsupportedCompression

log = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """What a compaction of ``path`` would keep and drop."""

    path: Path
    regions: int = 0
    present: int = 0
    empty: int = 0
    corrupt: int = 0
    undecoded: int = 0
    schemas: Counter = field(default_factory=Counter)

    @property
    def kept(self) -> int:
        return self.present - self.empty


def scan_region(path: Path) -> ScanReport:
    """Classify every present chunk in ``path`` without modifying anything.

    Uses the same read, decode and emptiness rules as compaction, so
    ``kept`` matches what :func:`compact_region` would retain.
    """
    path = Path(path)
    if not path.is_dir():
        raise NotADirectory(path)

    report = ScanReport(path=path)
    with AnvilRegion(path) as container:
        for region in container.regions():
            report.regions += 1
            for coord in container.chunks(region, include_empty=False):
                try:
                    chunk = container.read(coord)
                    if chunk is None:
                        continue
                    schema = classify(chunk.decode())
                except UnsupportedCompression as exc:
                    report.present += 1
                    report.undecoded += 1
                    log.debug("Chunk %s not decoded: %s", coord, exc)
                    continue
                except RecordReadFailure as exc:
                    report.corrupt += 1
                    log.warning("Unreadable chunk %s in %s: %s", coord, path.name, exc)
                    continue
                report.present += 1
                report.schemas[schema.kind] += 1
                if schema.is_empty():
                    report.empty += 1
    return report
