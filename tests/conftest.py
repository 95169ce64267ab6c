import zipfile

import numpy as np
import pytest

from balloon_nav.atmosphere.wind import WindLayer
from balloon_nav.terrain.hgt import HGT_SAMPLES


def hgt_bytes(value: int = 0, grid: np.ndarray | None = None) -> bytes:
    if grid is None:
        grid = np.full((HGT_SAMPLES, HGT_SAMPLES), value)
    return np.asarray(grid, dtype=">i2").tobytes()


@pytest.fixture
def tile_dir(tmp_path):
    path = tmp_path / "hgt"
    path.mkdir()
    return path


@pytest.fixture
def write_tile(tile_dir):
    def _write(key: str, value: int = 0, grid: np.ndarray | None = None):
        path = tile_dir / f"{key}.hgt"
        path.write_bytes(hgt_bytes(value, grid))
        return path

    return _write


@pytest.fixture
def make_zip(tmp_path):
    def _make(members: dict[str, bytes], name: str = "tiles.zip"):
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for member, data in members.items():
                archive.writestr(member, data)
        return path

    return _make


@pytest.fixture
def flat_ground():
    def _lookup(lat, lon):
        return 0.0

    return _lookup


@pytest.fixture
def two_layer_profile():
    return [
        WindLayer(alt_m=500.0, direction_deg=270.0, speed_mps=5.0),
        WindLayer(alt_m=1500.0, direction_deg=180.0, speed_mps=5.0),
    ]
