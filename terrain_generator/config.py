# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC TERRAIN.
Instead, pass a configuration dictionary to the BiomeTerrainGenerator instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 12345
# Size of the shuffled permutation table. The table is stored twice over
# (512 entries) so corner lookups never have to wrap.
PERMUTATION_TABLE_SIZE = 256

# --- Biome Selection ---
# Frequency of the low-frequency noise that decides which biome a point
# belongs to. This is independent of each biome's own noise_scale.
BIOME_SCALE = 0.0002
# Fraction of each biome segment over which the transition to the next biome
# happens. Must be in (0, 1]. Small values give near-binary biome edges.
BIOME_BLEND_WIDTH = 0.1
# Clamp the normalized FBM value into [0, 1] before scaling by a biome's
# amplitude. FBM with several octaves can overshoot [-1, 1]; with this
# disabled a biome may leave its [base_height, base_height + amplitude] band.
CLAMP_BIOME_NOISE = True

# 'biome': blend between the configured biome list.
# 'uniform': a single FBM layer driven by UNIFORM_NOISE_SCALE and
#            UNIFORM_HEIGHT_MULTIPLIER, with no biome selection.
TERRAIN_MODE = 'biome'
UNIFORM_NOISE_SCALE = 0.0015
UNIFORM_HEIGHT_MULTIPLIER = 0.2

# --- Per-Biome Defaults ---
# Used for any key a biome entry leaves out.
BIOME_BASE_HEIGHT = 0.0
BIOME_AMPLITUDE = 1.0
BIOME_NOISE_SCALE = 0.01
BIOME_OCTAVES = 5
BIOME_LACUNARITY = 2.0
BIOME_GAIN = 0.5

# The ordered default biome list. Order matters: biome i only ever blends
# with biome i + 1. Heights are normalized so a terrain's height range is
# [0, 1], matching what heightmap consumers expect.
DEFAULT_BIOMES = [
    {
        "name": "ocean_floor",
        "base_height": 0.0,
        "amplitude": 0.05,
        "noise_scale": 0.004,
        "octaves": 3,
        "lacunarity": 2.0,
        "gain": 0.5,
    },
    {
        "name": "plains",
        "base_height": 0.1,
        "amplitude": 0.08,
        "noise_scale": 0.002,
        "octaves": 4,
        "lacunarity": 2.0,
        "gain": 0.5,
    },
    {
        "name": "hills",
        "base_height": 0.2,
        "amplitude": 0.25,
        "noise_scale": 0.004,
        "octaves": 5,
        "lacunarity": 2.0,
        "gain": 0.5,
    },
    {
        "name": "mountains",
        "base_height": 0.35,
        "amplitude": 0.6,
        "noise_scale": 0.006,
        "octaves": 6,
        "lacunarity": 2.1,
        "gain": 0.48,
    },
]

# --- Heightmap Baking ---
# Resolution of a baked tile along one side. 2^n + 1 so that neighbouring
# tiles share their edge row/column.
TILE_RESOLUTION = 513
TILE_SIZE = 1000.0
