"""Wind-by-altitude profiles."""

from .wind import (
    CALM,
    Wind,
    WindLayer,
    WindProfile,
    effective_wind,
    layers_from_kmh,
    load_wind_profile_json,
)

__all__ = [
    "CALM",
    "Wind",
    "WindLayer",
    "WindProfile",
    "effective_wind",
    "layers_from_kmh",
    "load_wind_profile_json",
]
