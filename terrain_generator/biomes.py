# terrain_generator/biomes.py

"""
================================================================================
BIOME DEFINITIONS AND PER-BIOME HEIGHT SAMPLING
================================================================================
A biome is a named set of height parameters. Each biome turns the fractal sum
into a height: the FBM value is remapped from [-1, 1] to [0, 1], then scaled
by the biome's amplitude and offset by its base height.

Data Contract:
---------------
- Inputs:
    - Biome entries as dicts (from JSON) or Biome instances.
    - A SimplexNoise2D instance and world coordinates.
- Outputs:
    - Heights in world units. With clamping enabled a biome's height is
      always within [base_height, base_height + amplitude].
- Side Effects: None.
================================================================================
"""

from dataclasses import asdict, dataclass

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .fractal import fbm_2d

# Column layout of the packed parameter matrix used by the compiled kernels.
_BASE_HEIGHT, _AMPLITUDE, _NOISE_SCALE, _OCTAVES, _LACUNARITY, _GAIN = range(6)


@dataclass(frozen=True)
class Biome:
    """Height-generation parameters for one region type."""
    name: str
    base_height: float = DEFAULTS.BIOME_BASE_HEIGHT
    amplitude: float = DEFAULTS.BIOME_AMPLITUDE
    noise_scale: float = DEFAULTS.BIOME_NOISE_SCALE
    octaves: int = DEFAULTS.BIOME_OCTAVES
    lacunarity: float = DEFAULTS.BIOME_LACUNARITY
    gain: float = DEFAULTS.BIOME_GAIN

    @classmethod
    def from_dict(cls, data: dict) -> "Biome":
        """
        Builds a Biome from a configuration entry, filling missing keys from
        the internal defaults.

        Raises:
            ValueError: If the entry has no name or a non-integral octave count.
        """
        name = data.get('name')
        if not name:
            raise ValueError(f"Biome entry is missing a 'name': {data!r}")

        octaves = data.get('octaves', DEFAULTS.BIOME_OCTAVES)
        if isinstance(octaves, bool) or int(octaves) != octaves:
            raise ValueError(f"Biome '{name}' has a non-integral octave count: {octaves!r}")

        return cls(
            name=str(name),
            base_height=float(data.get('base_height', DEFAULTS.BIOME_BASE_HEIGHT)),
            amplitude=float(data.get('amplitude', DEFAULTS.BIOME_AMPLITUDE)),
            noise_scale=float(data.get('noise_scale', DEFAULTS.BIOME_NOISE_SCALE)),
            octaves=int(octaves),
            lacunarity=float(data.get('lacunarity', DEFAULTS.BIOME_LACUNARITY)),
            gain=float(data.get('gain', DEFAULTS.BIOME_GAIN)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def load_biomes(entries) -> tuple:
    """Converts a sequence of dicts and/or Biome instances to an ordered tuple of Biomes."""
    return tuple(entry if isinstance(entry, Biome) else Biome.from_dict(entry) for entry in entries)


def uniform_biome(noise_scale: float = DEFAULTS.UNIFORM_NOISE_SCALE,
                  height_multiplier: float = DEFAULTS.UNIFORM_HEIGHT_MULTIPLIER) -> Biome:
    """
    A single biome that reproduces plain FBM terrain: a 5-octave fractal sum
    remapped to [0, 1] and scaled by the height multiplier.
    """
    return Biome(
        name="uniform",
        base_height=0.0,
        amplitude=height_multiplier,
        noise_scale=noise_scale,
        octaves=5,
        lacunarity=2.0,
        gain=0.5,
    )


def pack_biomes(biomes) -> np.ndarray:
    """Packs biome parameters into an (n, 6) float matrix, one row per biome."""
    params = np.empty((len(biomes), 6), dtype=np.float64)
    for row, biome in enumerate(biomes):
        params[row, _BASE_HEIGHT] = biome.base_height
        params[row, _AMPLITUDE] = biome.amplitude
        params[row, _NOISE_SCALE] = biome.noise_scale
        params[row, _OCTAVES] = biome.octaves
        params[row, _LACUNARITY] = biome.lacunarity
        params[row, _GAIN] = biome.gain
    params.setflags(write=False)
    return params


@njit
def biome_height(perm, params, x, z, clamp):
    """Height of one packed biome row at a world coordinate."""
    noise_scale = params[_NOISE_SCALE]
    value = fbm_2d(
        perm,
        x * noise_scale,
        z * noise_scale,
        int(params[_OCTAVES]),
        params[_LACUNARITY],
        params[_GAIN]
    )

    # Normalize [-1, 1] -> [0, 1]. The fractal sum can overshoot slightly.
    value = (value + 1.0) * 0.5
    if clamp:
        if value < 0.0:
            value = 0.0
        elif value > 1.0:
            value = 1.0

    return params[_BASE_HEIGHT] + value * params[_AMPLITUDE]


def sample_biome_height(noise, biome: Biome, world_x: float, world_z: float, clamp: bool = DEFAULTS.CLAMP_BIOME_NOISE) -> float:
    """
    Samples a single biome's height at a world coordinate.

    Args:
        noise (SimplexNoise2D): The seeded noise source.
        biome (Biome): The biome whose parameters drive the fractal sum.
        world_x, world_z (float): World-space coordinate.
        clamp (bool): Clamp the normalized noise into [0, 1] first.
    """
    params = pack_biomes((biome,))[0]
    return float(biome_height(noise.permutation_table, params, float(world_x), float(world_z), bool(clamp)))
