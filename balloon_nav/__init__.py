"""Hot-air-balloon trajectory prediction and task optimization."""

from .config import NavigatorConfig, load_config
from .atmosphere.wind import WindLayer, WindProfile, effective_wind
from .core.geodesy import GeoPoint
from .terrain.elevation import ElevationService

__all__ = [
    "NavigatorConfig",
    "load_config",
    "WindLayer",
    "WindProfile",
    "effective_wind",
    "GeoPoint",
    "ElevationService",
]
