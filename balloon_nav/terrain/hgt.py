"""SRTM-style ``.hgt`` tile format: 1201x1201 big-endian int16, north row first."""

from __future__ import annotations

import math
import re

import numpy as np

HGT_SAMPLES = 1201
HGT_BYTES = HGT_SAMPLES * HGT_SAMPLES * 2
HGT_VOID = -32768
HGT_SUFFIX = ".hgt"

_TILE_KEY_RE = re.compile(r"^([NS])(\d{2})([EW])(\d{3})$")


class TileSizeError(ValueError):
    pass


def tile_key(lat_deg: float, lon_deg: float) -> str:
    """Name of the tile containing the point, after its south-west corner."""
    lat_floor = math.floor(lat_deg)
    lon_floor = math.floor(lon_deg)
    ns = "N" if lat_floor >= 0 else "S"
    ew = "E" if lon_floor >= 0 else "W"
    return f"{ns}{abs(lat_floor):02d}{ew}{abs(lon_floor):03d}"


def tile_key_from_filename(filename: str) -> str | None:
    """Return the upper-cased tile key for a valid ``.hgt`` filename, else ``None``."""
    if not filename.lower().endswith(HGT_SUFFIX):
        return None
    key = filename[: -len(HGT_SUFFIX)].upper()
    if _TILE_KEY_RE.match(key) is None:
        return None
    return key


def tile_origin(key: str) -> tuple[int, int]:
    """South-west corner ``(lat, lon)`` of a tile key."""
    match = _TILE_KEY_RE.match(key)
    if match is None:
        raise ValueError(f"Invalid tile key: {key!r}")
    ns, lat, ew, lon = match.groups()
    return (int(lat) if ns == "N" else -int(lat)), (int(lon) if ew == "E" else -int(lon))


def decode_tile(data: bytes) -> np.ndarray:
    if len(data) != HGT_BYTES:
        raise TileSizeError(f"expected {HGT_BYTES} bytes, got {len(data)}")
    return np.frombuffer(data, dtype=">i2").reshape(HGT_SAMPLES, HGT_SAMPLES)


def sample_tile(grid: np.ndarray, lat_deg: float, lon_deg: float) -> float | None:
    """Bilinear height at a point inside the tile, rounded to whole meters.

    If any of the four surrounding samples is void, the first non-void one
    (NW, NE, SW, SE order) is returned instead; all void gives ``None``.
    """
    last = HGT_SAMPLES - 1
    lat_frac = (lat_deg - math.floor(lat_deg)) * last
    lon_frac = (lon_deg - math.floor(lon_deg)) * last

    # rows run north to south
    row_pos = last - lat_frac
    row0 = math.floor(row_pos)
    col0 = math.floor(lon_frac)
    row1 = min(row0 + 1, last)
    col1 = min(col0 + 1, last)

    d_row = row_pos - row0
    d_col = lon_frac - col0

    h00 = int(grid[row0, col0])
    h01 = int(grid[row0, col1])
    h10 = int(grid[row1, col0])
    h11 = int(grid[row1, col1])

    corners = (h00, h01, h10, h11)
    if HGT_VOID in corners:
        valid = [h for h in corners if h != HGT_VOID]
        return float(valid[0]) if valid else None

    h0 = h00 + (h01 - h00) * d_col
    h1 = h10 + (h11 - h10) * d_col
    return float(math.floor(h0 + (h1 - h0) * d_row + 0.5))
