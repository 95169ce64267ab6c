"""Ground elevation from HGT tiles."""

from .elevation import ElevationService, TileImportReport
from .hgt import HGT_BYTES, HGT_SAMPLES, HGT_VOID, tile_key

__all__ = [
    "ElevationService",
    "TileImportReport",
    "HGT_BYTES",
    "HGT_SAMPLES",
    "HGT_VOID",
    "tile_key",
]
