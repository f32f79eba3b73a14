# terrain_generator/__init__.py

# This file makes the 'terrain_generator' directory a Python package.
# We can also use it to define the public API of the package.

from .biomes import Biome, load_biomes, sample_biome_height, uniform_biome
from .generator import BiomeTerrainGenerator
from .noise import SimplexNoise2D, build_permutation_table

__all__ = [
    "Biome",
    "BiomeTerrainGenerator",
    "SimplexNoise2D",
    "build_permutation_table",
    "load_biomes",
    "sample_biome_height",
    "uniform_biome",
]
