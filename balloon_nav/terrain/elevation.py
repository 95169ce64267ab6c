"""Tile-backed ground elevation lookup with an LRU tile cache."""

from __future__ import annotations

import logging
import threading
import zipfile
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable

import numpy as np

from ..config import ElevationConfig
from ..core.geodesy import GeoPoint
from .hgt import (
    HGT_BYTES,
    HGT_SUFFIX,
    TileSizeError,
    decode_tile,
    sample_tile,
    tile_key,
    tile_key_from_filename,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TileImportReport:
    imported: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class ElevationService:
    """Ground elevation from ``.hgt`` tiles stored in ``storage_dir``.

    The set of tiles on disk is scanned once at construction (and again on
    :meth:`rescan`). A missing ``storage_dir`` holds no tiles and is created
    by the first successful import. Loaded grids are kept in a bounded LRU
    cache keyed by tile name. All state is per instance and guarded by a lock.
    """

    def __init__(self, storage_dir: str | Path, cache_tiles: int = 20):
        if cache_tiles <= 0:
            raise ValueError("cache_tiles must be positive")
        self.storage_dir = Path(storage_dir)
        self.cache_tiles = int(cache_tiles)

        self._lock = threading.RLock()
        self._cache: OrderedDict[str, np.ndarray] = OrderedDict()
        self._available: set[str] = set()
        self.rescan()

    @classmethod
    def from_config(cls, config: ElevationConfig) -> "ElevationService":
        return cls(config.storage_dir, cache_tiles=config.cache_tiles)

    def rescan(self) -> None:
        found = set()
        paths = self.storage_dir.iterdir() if self.storage_dir.is_dir() else ()
        for path in paths:
            if not path.is_file():
                continue
            key = tile_key_from_filename(path.name)
            if key is not None:
                found.add(key)
        with self._lock:
            self._available = found
        logger.info("Found %d HGT tiles in %s", len(found), self.storage_dir)

    @property
    def available_tiles(self) -> list[str]:
        with self._lock:
            return sorted(self._available)

    @property
    def cached_tiles(self) -> list[str]:
        """Cached tile keys, least recently used first."""
        with self._lock:
            return list(self._cache.keys())

    def has_tile(self, lat_deg: float, lon_deg: float) -> bool:
        with self._lock:
            return tile_key(lat_deg, lon_deg) in self._available

    def _tile_path(self, key: str) -> Path:
        return self.storage_dir / f"{key}{HGT_SUFFIX}"

    def _load_tile(self, key: str) -> np.ndarray | None:
        with self._lock:
            grid = self._cache.get(key)
            if grid is not None:
                self._cache.move_to_end(key)
                return grid

            if key not in self._available:
                return None

            path = self._tile_path(key)
            try:
                grid = decode_tile(path.read_bytes())
            except TileSizeError as exc:
                logger.warning("Rejecting %s: %s", path.name, exc)
                return None
            except OSError as exc:
                logger.error("Failed to read %s: %s", path, exc)
                return None

            while len(self._cache) >= self.cache_tiles:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted tile %s from cache", evicted)
            self._cache[key] = grid
            return grid

    def get_elevation(self, lat_deg: float, lon_deg: float) -> float | None:
        grid = self._load_tile(tile_key(lat_deg, lon_deg))
        if grid is None:
            return None
        return sample_tile(grid, lat_deg, lon_deg)

    def get_elevations(self, points: Iterable[GeoPoint]) -> list[float | None]:
        return [self.get_elevation(p.lat_deg, p.lon_deg) for p in points]

    def import_archive(self, archive_path: str | Path) -> TileImportReport:
        """Copy valid ``.hgt`` members of a zip archive into the tile store.

        Each member is validated on its own; a bad member is reported in
        ``errors`` and never aborts the rest of the import.
        """
        report = TileImportReport()
        try:
            with zipfile.ZipFile(archive_path) as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    self._import_member(archive, info, report)
        except (OSError, zipfile.BadZipFile) as exc:
            report.errors.append(f"Archive error: {exc}")

        logger.info(
            "Import from %s: %d tiles imported, %d errors",
            archive_path,
            len(report.imported),
            len(report.errors),
        )
        return report

    def _import_member(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo, report: TileImportReport) -> None:
        name = PurePosixPath(info.filename).name
        if not name.lower().endswith(HGT_SUFFIX):
            return

        key = tile_key_from_filename(name)
        if key is None:
            report.errors.append(f"{name}: invalid tile name")
            return

        if info.file_size != HGT_BYTES:
            report.errors.append(f"{name}: wrong size ({info.file_size} bytes)")
            return

        try:
            data = archive.read(info)
            if len(data) != HGT_BYTES:
                report.errors.append(f"{name}: wrong size ({len(data)} bytes)")
                return
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            self._tile_path(key).write_bytes(data)
        except (OSError, zipfile.BadZipFile, RuntimeError) as exc:
            report.errors.append(f"{name}: {exc}")
            return

        with self._lock:
            self._available.add(key)
            self._cache.pop(key, None)
        report.imported.append(key)
