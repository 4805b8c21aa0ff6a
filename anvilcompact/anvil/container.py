"""Directory of region files addressed by chunk coordinate."""

from __future__ import annotations

import logging
from pathlib import Path

from anvilcompact.anvil.chunk import ChunkData
from anvilcompact.anvil.coords import ChunkCoordinate, RegionCoordinate
from anvilcompact.anvil.region import RegionFile

log = logging.getLogger(__name__)


class AnvilRegion:
    """A ``region``/``entities``/``poi`` style directory of ``.mca`` files.

    Region files are opened lazily and kept open until :meth:`close`.
    Use as a context manager so handles are released on every exit path.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._files: dict[RegionCoordinate, RegionFile] = {}

    @classmethod
    def open(cls, path: Path) -> AnvilRegion:
        """Open the container at ``path``, creating the directory if needed."""
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return cls(path)

    def __enter__(self) -> AnvilRegion:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def regions(self) -> list[RegionCoordinate]:
        """Region coordinates of every ``r.<x>.<z>.mca`` file, sorted."""
        coords = []
        for entry in self.path.iterdir():
            coord = RegionCoordinate.from_filename(entry.name)
            if coord is not None and entry.is_file():
                coords.append(coord)
        return sorted(coords)

    def chunks(self, region: RegionCoordinate, include_empty: bool = True) -> list[ChunkCoordinate]:
        """Chunk slots of ``region``; all 1024 when ``include_empty`` is set."""
        if include_empty:
            return region.chunks()
        region_file = self._region_file(region, create=False)
        if region_file is None:
            return []
        return region_file.present_chunks()

    def read(self, coord: ChunkCoordinate) -> ChunkData | None:
        region_file = self._region_file(coord.region, create=False)
        if region_file is None:
            return None
        return region_file.read(coord)

    def write(self, coord: ChunkCoordinate, chunk: ChunkData) -> None:
        region_file = self._region_file(coord.region, create=True)
        assert region_file is not None
        region_file.write(coord, chunk)

    def _region_file(self, region: RegionCoordinate, create: bool) -> RegionFile | None:
        region_file = self._files.get(region)
        if region_file is not None:
            return region_file
        path = self.path / region.filename
        if not create and not path.exists():
            return None
        region_file = RegionFile(path, region)
        self._files[region] = region_file
        return region_file

    def close(self) -> None:
        files, self._files = self._files, {}
        for region_file in files.values():
            region_file.close()
        log.debug("Closed %d region file(s) in %s", len(files), self.path)
