import logging

import numpy as np
import pytest

from terrain_generator.generator import BiomeTerrainGenerator


@pytest.fixture
def logger():
    return logging.getLogger("terrain_generator.tests")


@pytest.fixture
def rng():
    return np.random.default_rng(2024)


@pytest.fixture
def make_generator(logger):
    def _make(**overrides):
        return BiomeTerrainGenerator(config=dict(overrides), logger=logger)
    return _make


@pytest.fixture
def stepped_biomes():
    """Three biomes far apart in height so transitions are easy to see."""
    return [
        {"name": "low", "base_height": 0.0, "amplitude": 1.0, "noise_scale": 0.05, "octaves": 2},
        {"name": "mid", "base_height": 100.0, "amplitude": 1.0, "noise_scale": 0.05, "octaves": 2},
        {"name": "high", "base_height": 200.0, "amplitude": 1.0, "noise_scale": 0.05, "octaves": 2},
    ]
