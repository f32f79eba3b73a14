# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the main BiomeTerrainGenerator class. It turns a world
coordinate into a height by selecting two neighbouring biomes with a
low-frequency noise layer and blending their heights.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'biome_scale',
      'biome_blend_width' and 'biomes'.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - Heights in world units, as floats or NumPy arrays.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is
  deterministic. Scalar and grid sampling share the same compiled kernels and
  agree bit for bit.
================================================================================
"""

import logging

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .biomes import biome_height, load_biomes, pack_biomes, sample_biome_height, uniform_biome
from .noise import SimplexNoise2D, as_coordinate_pair, simplex_noise_2d


@njit
def _smoothstep(t):
    "3t^2 - 2t^3 on t clamped to [0, 1]. NaN passes through."
    if t < 0.0:
        t = 0.0
    elif t > 1.0:
        t = 1.0
    return t * t * (3.0 - 2.0 * t)


@njit
def _bracketing_biomes(biome_count, selection, blend_width):
    """
    Maps a selection value in [0, 1] to the two neighbouring biome rows and
    the smoothed weight of the second one.
    """
    biome_pos = selection * (biome_count - 1)
    biome_index = int(np.floor(biome_pos))

    biome_a = min(max(biome_index, 0), biome_count - 1)
    biome_b = min(max(biome_index + 1, 0), biome_count - 1)

    blend = _smoothstep((biome_pos - biome_index) / blend_width)
    return biome_a, biome_b, blend


@njit
def _blend_biome_heights(perm, biome_params, selection, x, z, blend_width, clamp):
    if selection != selection:
        return np.nan

    biome_a, biome_b, blend = _bracketing_biomes(biome_params.shape[0], selection, blend_width)

    height_a = biome_height(perm, biome_params[biome_a], x, z, clamp)
    height_b = biome_height(perm, biome_params[biome_b], x, z, clamp)

    return height_a + (height_b - height_a) * blend


@njit
def _biome_selection(perm, x, z, biome_scale):
    "Low-frequency selection noise, normalized [-1, 1] -> [0, 1]."
    return (simplex_noise_2d(perm, x * biome_scale, z * biome_scale) + 1.0) * 0.5


@njit
def _sample_height(perm, biome_params, x, z, biome_scale, blend_width, clamp):
    selection = _biome_selection(perm, x, z, biome_scale)
    return _blend_biome_heights(perm, biome_params, selection, x, z, blend_width, clamp)


@njit
def _sample_height_grid(perm, biome_params, x, z, biome_scale, blend_width, clamp):
    if x.size != z.size:
        raise ValueError("Coordinate arrays must have the same number of elements.")
    flat_x = x.ravel()
    flat_z = z.ravel()
    out = np.empty(flat_x.size)
    for k in range(flat_x.size):
        out[k] = _sample_height(perm, biome_params, flat_x[k], flat_z[k], biome_scale, blend_width, clamp)
    return out.reshape(x.shape)


class BiomeTerrainGenerator:
    """
    Generates terrain heights from an ordered list of biomes.
    This class is backend-only and does not build meshes or images.
    """
    def __init__(self, config: dict, logger: logging.Logger, permutation_table: np.ndarray = None):
        """
        Initializes the terrain generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            permutation_table (np.ndarray, optional): A pre-computed noise
                permutation table. If None, one will be generated from the seed.

        Raises:
            ValueError: If the biome list is empty or the blend width is not
                positive.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("BiomeTerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'biome_scale': float(self.user_config.get('biome_scale', DEFAULTS.BIOME_SCALE)),
            'biome_blend_width': float(self.user_config.get('biome_blend_width', DEFAULTS.BIOME_BLEND_WIDTH)),
            'clamp_biome_noise': bool(self.user_config.get('clamp_biome_noise', DEFAULTS.CLAMP_BIOME_NOISE)),
            'terrain_mode': self.user_config.get('terrain_mode', DEFAULTS.TERRAIN_MODE),
            'uniform_noise_scale': float(self.user_config.get('uniform_noise_scale', DEFAULTS.UNIFORM_NOISE_SCALE)),
            'uniform_height_multiplier': float(self.user_config.get('uniform_height_multiplier', DEFAULTS.UNIFORM_HEIGHT_MULTIPLIER)),
        }

        # --- Resolve the Biome List ---
        mode = self.settings['terrain_mode']
        if mode == 'uniform':
            self.biomes = (uniform_biome(
                self.settings['uniform_noise_scale'],
                self.settings['uniform_height_multiplier']
            ),)
        elif mode == 'biome':
            self.biomes = load_biomes(self.user_config.get('biomes', DEFAULTS.DEFAULT_BIOMES))
        else:
            raise ValueError(f"Unknown terrain_mode '{mode}'. Expected 'biome' or 'uniform'.")

        if not self.biomes:
            raise ValueError("BiomeTerrainGenerator needs at least one biome.")

        blend_width = self.settings['biome_blend_width']
        if not blend_width > 0.0:
            raise ValueError(f"biome_blend_width must be positive, got {blend_width}")
        if blend_width > 1.0:
            # The blend weight then never reaches 1 before the next biome
            # takes over, which leaves a step at every biome boundary.
            self.logger.warning(
                f"biome_blend_width={blend_width} is above 1.0; biome boundaries will not be seamless."
            )

        self.settings['biomes'] = [biome.to_dict() for biome in self.biomes]
        self._biome_params = pack_biomes(self.biomes)

        # --- Initialize Noise ---
        if permutation_table is not None:
            self.noise = SimplexNoise2D(permutation_table=permutation_table)
            self.logger.debug("Initialized with injected permutation table.")
        else:
            self.logger.debug("No permutation table provided, generating new one from seed.")
            self.noise = SimplexNoise2D(seed=self.settings['seed'])

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']

        self.logger.info(f"BiomeTerrainGenerator initialized with seed: {self.seed}")
        self.logger.info(
            f"Terrain mode '{mode}' with {len(self.biomes)} biome(s): "
            f"{', '.join(biome.name for biome in self.biomes)}"
        )

    @property
    def permutation_table(self) -> np.ndarray:
        "The current permutation table, exposed for baking in worker processes."
        return self.noise.permutation_table

    def initialize(self, seed: int):
        """
        Re-seeds the generator. Noise from the previous seed has no relation
        to the new field. Must not overlap with sampling on other threads.
        """
        self.noise.initialize(seed)
        self.settings['seed'] = seed
        self.seed = seed
        self.logger.info(f"BiomeTerrainGenerator re-initialized with seed: {seed}")

    def sample_height(self, world_x: float, world_z: float) -> float:
        """Returns the blended terrain height at a world-space coordinate."""
        return float(_sample_height(
            self.noise.permutation_table,
            self._biome_params,
            float(world_x), float(world_z),
            self.settings['biome_scale'],
            self.settings['biome_blend_width'],
            self.settings['clamp_biome_noise']
        ))

    def sample_height_at_selection(self, selection: float, world_x: float, world_z: float) -> float:
        """
        Blends the biome heights at a coordinate for an explicit selection
        value in [0, 1] instead of the one the selection noise would give.
        """
        return float(_blend_biome_heights(
            self.noise.permutation_table,
            self._biome_params,
            float(selection),
            float(world_x), float(world_z),
            self.settings['biome_blend_width'],
            self.settings['clamp_biome_noise']
        ))

    def biome_selection(self, world_x: float, world_z: float) -> tuple:
        """
        Reports which biomes a coordinate blends between.

        Returns:
            tuple: (biome_a, biome_b, blend) where blend is the weight of
            biome_b in the final height.
        """
        selection = _biome_selection(
            self.noise.permutation_table, float(world_x), float(world_z), self.settings['biome_scale']
        )
        if np.isnan(selection):
            return self.biomes[0], self.biomes[0], float('nan')
        biome_a, biome_b, blend = _bracketing_biomes(
            len(self.biomes), selection, self.settings['biome_blend_width']
        )
        return self.biomes[biome_a], self.biomes[biome_b], float(blend)

    def sample_biome_height(self, biome, world_x: float, world_z: float) -> float:
        """Samples one biome's height, ignoring biome selection."""
        return sample_biome_height(self.noise, biome, world_x, world_z, self.settings['clamp_biome_noise'])

    def sample_height_grid(self, x_coords, z_coords) -> np.ndarray:
        """
        Samples heights for every element of two same-shaped coordinate
        arrays. Equivalent to calling sample_height() per element. The output
        has the shape of the inputs; scalars give a 0-d array.
        """
        flat_x, flat_z, shape = as_coordinate_pair(x_coords, z_coords)

        heights = _sample_height_grid(
            self.noise.permutation_table,
            self._biome_params,
            flat_x, flat_z,
            self.settings['biome_scale'],
            self.settings['biome_blend_width'],
            self.settings['clamp_biome_noise']
        ).reshape(shape)

        if heights.size and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"Sampled {heights.size} heights: min={np.nanmin(heights):.4f}, max={np.nanmax(heights):.4f}"
            )
        return heights

    def get_coordinate_grid(self, world_x, world_z, width, depth, resolution_w, resolution_h):
        """
        Generates a coordinate grid covering a rectangle edge to edge.
        The first and last samples sit exactly on the rectangle's borders, so
        two rectangles that share a border also share those samples.

        Returns:
            tuple: (x_grid, z_grid), each of shape (resolution_h, resolution_w).
        """
        x_coords = np.linspace(world_x, world_x + width, resolution_w)
        z_coords = np.linspace(world_z, world_z + depth, resolution_h)
        return np.meshgrid(x_coords, z_coords)
