"""Physical and unit constants shared across the navigation core."""

EARTH_RADIUS_M = 6_371_000.0

KMH_PER_MPS = 3.6
M_PER_FT = 0.3048

GRAVITY_MPS2 = 9.81
SEA_LEVEL_AIR_DENSITY_KGM3 = 1.225
