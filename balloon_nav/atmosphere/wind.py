"""Measured wind layers and the nearest-layer wind resolver.

Wind between two measured layers is *not* interpolated: a balloon has inertia
and does not take on a new layer's wind instantly, so the resolver returns the
closer of the two bracketing layers verbatim.
"""

from __future__ import annotations

import json
from bisect import bisect_left
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..core.constants import KMH_PER_MPS

SPEED_UNITS_MPS = "mps"
SPEED_UNITS_KMH = "kmh"
SPEED_UNIT_CHOICES = (SPEED_UNITS_MPS, SPEED_UNITS_KMH)


@dataclass(frozen=True, slots=True)
class WindLayer:
    alt_m: float
    direction_deg: float
    speed_mps: float

    @classmethod
    def from_kmh(cls, alt_m: float, direction_deg: float, speed_kmh: float) -> "WindLayer":
        return cls(alt_m=float(alt_m), direction_deg=float(direction_deg), speed_mps=float(speed_kmh) / KMH_PER_MPS)


@dataclass(frozen=True, slots=True)
class Wind:
    direction_deg: float
    speed_mps: float

    @property
    def drift_bearing_deg(self) -> float:
        return (self.direction_deg + 180.0) % 360.0

    @property
    def speed_kmh(self) -> float:
        return self.speed_mps * KMH_PER_MPS


CALM = Wind(direction_deg=0.0, speed_mps=0.0)


def layers_from_kmh(items: Iterable[tuple[float, float, float]]) -> list[WindLayer]:
    return [WindLayer.from_kmh(alt, direction, speed) for alt, direction, speed in items]


class WindProfile:
    """Immutable altitude-sorted snapshot of measured wind layers."""

    __slots__ = ("layers", "_altitudes")

    def __init__(self, layers: Iterable[WindLayer]):
        # sorted() is stable, so duplicate altitudes keep their input order
        self.layers: tuple[WindLayer, ...] = tuple(sorted(layers, key=lambda layer: layer.alt_m))
        self._altitudes = [layer.alt_m for layer in self.layers]

    def __len__(self) -> int:
        return len(self.layers)

    def __bool__(self) -> bool:
        return bool(self.layers)

    @property
    def altitudes_m(self) -> list[float]:
        """Distinct measured altitudes, ascending."""
        return sorted(set(self._altitudes))

    def wind_at(self, alt_m: float) -> Wind:
        if not self.layers:
            return CALM

        layers = self.layers
        if alt_m <= layers[0].alt_m:
            return _as_wind(layers[0])
        if alt_m >= layers[-1].alt_m:
            return _as_wind(layers[-1])

        idx = bisect_left(self._altitudes, alt_m)
        lower = layers[idx - 1]
        upper = layers[idx]
        midpoint = 0.5 * (lower.alt_m + upper.alt_m)
        return _as_wind(lower if alt_m < midpoint else upper)


def _as_wind(layer: WindLayer) -> Wind:
    return Wind(direction_deg=layer.direction_deg, speed_mps=layer.speed_mps)


def effective_wind(alt_m: float, layers: Iterable[WindLayer]) -> Wind:
    """Resolve the wind at ``alt_m`` using the nearest measured layer."""
    profile = layers if isinstance(layers, WindProfile) else WindProfile(layers)
    return profile.wind_at(alt_m)


def load_wind_profile_json(path: str | Path, units: str = "mps") -> list[WindLayer]:
    """Read layers from a JSON list (or ``{"layers": [...]}``) of altitude/direction/speed objects."""
    if units not in SPEED_UNIT_CHOICES:
        raise ValueError(f"Unsupported speed units: {units!r}. Expected one of {SPEED_UNIT_CHOICES}.")

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Wind profile file not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    items = raw.get("layers") if isinstance(raw, dict) else raw
    if not isinstance(items, list):
        raise ValueError("Wind profile JSON must be a list or an object with key 'layers'")

    layers: list[WindLayer] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"Wind layer {i} must be a JSON object")
        try:
            alt = float(item["alt_m"])
            direction = float(item["direction_deg"])
            speed = float(item["speed"])
        except KeyError as exc:
            raise ValueError(f"Wind layer {i} is missing {exc.args[0]!r}") from exc
        if units == SPEED_UNITS_KMH:
            layers.append(WindLayer.from_kmh(alt, direction, speed))
        else:
            layers.append(WindLayer(alt_m=alt, direction_deg=direction, speed_mps=speed))
    return layers
