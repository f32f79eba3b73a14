# terrain_generator/noise.py

"""
================================================================================
SIMPLEX NOISE GENERATION
================================================================================
This module provides seeded 2D simplex noise. The compiled kernels are pure,
stateless functions of an explicit permutation table; the SimplexNoise2D class
owns one such table and rebuilds it when re-seeded.

Data Contract:
---------------
- Inputs:
    - seed: An integer used to shuffle the permutation table.
    - perm: A 512-entry permutation table (the 256-entry shuffle, twice).
    - x, y: Scalar coordinates, or NumPy arrays of coordinates.
- Outputs:
    - Noise values in approximately [-1, 1]. Non-finite coordinates give NaN.
- Side Effects: None. Re-seeding replaces the table of that instance only.
- Invariants: Given the same seed, the output is bit-identical. The shape of
  an array output matches the shape of its inputs.
================================================================================
"""

import math
import threading

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Skew/unskew factors between the square grid and the triangular lattice.
_F2 = 0.5 * (math.sqrt(3.0) - 1.0)
_G2 = (3.0 - math.sqrt(3.0)) / 6.0
# Brings the summed corner contributions into roughly [-1, 1].
_OUTPUT_SCALE = 70.0

# Fixed gradient directions, shared by every seed.
_GRADIENT_VECTORS = np.array([
    [1.0, 1.0], [-1.0, 1.0], [1.0, -1.0], [-1.0, -1.0],
    [1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0],
])

_SEED_MODULUS = 2 ** 64


def build_permutation_table(seed: int) -> np.ndarray:
    """
    Builds the read-only 512-entry permutation table for a seed.

    numpy's Generator.shuffle is a Fisher-Yates shuffle, so the same seed
    always yields the same table. Negative seeds are folded into the
    unsigned 64-bit range numpy accepts.
    """
    size = DEFAULTS.PERMUTATION_TABLE_SIZE
    p = np.arange(size, dtype=np.int64)
    rng = np.random.default_rng(int(seed) % _SEED_MODULUS)
    rng.shuffle(p)
    table = np.concatenate([p, p])
    table.setflags(write=False)
    return table


@njit
def _corner_contribution(perm, ii, jj, x, y):
    "(0.5 - d^2)^4 * dot(gradient, offset), or exactly zero outside the radius."
    t = 0.5 - x * x - y * y
    if t < 0.0:
        return 0.0
    g = _GRADIENT_VECTORS[perm[ii + perm[jj]] & 7]
    t *= t
    return t * t * (g[0] * x + g[1] * y)


@njit
def simplex_noise_2d(perm, x, y):
    """
    Samples 2D simplex noise at a single point.
    This function is JIT-compiled with Numba.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
        return np.nan

    # Skew into lattice space to find the containing cell. floor() rounds
    # toward -inf, which keeps cells correct for negative coordinates.
    s = (x + y) * _F2
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))

    # Unskew the cell origin back and take the offset from it.
    t = (i + j) * _G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Pick the lower or upper triangle of the cell.
    if x0 > y0:
        i1 = 1
        j1 = 0
    else:
        i1 = 0
        j1 = 1

    x1 = x0 - i1 + _G2
    y1 = y0 - j1 + _G2
    x2 = x0 - 1.0 + 2.0 * _G2
    y2 = y0 - 1.0 + 2.0 * _G2

    ii = i & 255
    jj = j & 255

    n0 = _corner_contribution(perm, ii, jj, x0, y0)
    n1 = _corner_contribution(perm, ii + i1, jj + j1, x1, y1)
    n2 = _corner_contribution(perm, ii + 1, jj + 1, x2, y2)

    return _OUTPUT_SCALE * (n0 + n1 + n2)


@njit
def simplex_noise_grid(perm, x, y):
    """Samples simplex noise for every element of two same-shaped arrays."""
    if x.size != y.size:
        raise ValueError("Coordinate arrays must have the same number of elements.")
    flat_x = x.ravel()
    flat_y = y.ravel()
    out = np.empty(flat_x.size)
    for k in range(flat_x.size):
        out[k] = simplex_noise_2d(perm, flat_x[k], flat_y[k])
    return out.reshape(x.shape)


def as_coordinate_array(values) -> np.ndarray:
    "Coerces coordinates to the contiguous float64 arrays the kernels expect."
    return np.ascontiguousarray(values, dtype=np.float64)


def as_coordinate_pair(x, y) -> tuple:
    """
    Coerces two coordinate inputs for the grid kernels.

    Returns:
        tuple: (flat_x, flat_y, shape). The kernels run on the flat 1-D
        arrays; reshape their output to `shape` to match the inputs, which
        is () for scalar inputs.

    Raises:
        ValueError: If the inputs differ in shape.
    """
    x = as_coordinate_array(x)
    y = as_coordinate_array(y)
    if x.shape != y.shape:
        raise ValueError(f"Coordinate arrays differ in shape: {x.shape} vs {y.shape}")
    return x.reshape(-1), y.reshape(-1), x.shape


class SimplexNoise2D:
    """
    An owned, seeded simplex noise generator.

    Several instances with different seeds can coexist. Sampling only reads
    the permutation table; initialize() builds a complete new table and then
    swaps it in, so a sample never sees a partially rebuilt table.
    """
    def __init__(self, seed: int = None, permutation_table: np.ndarray = None):
        """
        Args:
            seed (int, optional): Seed to build the permutation table from.
            permutation_table (np.ndarray, optional): A pre-computed
                512-entry table. Takes precedence over the seed.
        """
        self._lock = threading.Lock()
        self._perm = None
        self.seed = None

        if permutation_table is not None:
            table = np.array(permutation_table, dtype=np.int64)
            if table.shape != (2 * DEFAULTS.PERMUTATION_TABLE_SIZE,):
                raise ValueError(
                    f"Permutation table must have {2 * DEFAULTS.PERMUTATION_TABLE_SIZE} "
                    f"entries, got shape {table.shape}"
                )
            table.setflags(write=False)
            self._perm = table
        elif seed is not None:
            self.initialize(seed)

    def initialize(self, seed: int):
        "Rebuilds the permutation table for a new seed."
        table = build_permutation_table(seed)
        with self._lock:
            self._perm = table
            self.seed = seed

    @property
    def is_initialized(self) -> bool:
        return self._perm is not None

    @property
    def permutation_table(self) -> np.ndarray:
        perm = self._perm
        if perm is None:
            raise RuntimeError("SimplexNoise2D must be initialized with a seed before sampling.")
        return perm

    def noise(self, x: float, y: float) -> float:
        return float(simplex_noise_2d(self.permutation_table, float(x), float(y)))

    def noise_grid(self, x, y) -> np.ndarray:
        """Noise for same-shaped coordinate arrays; the output has their shape."""
        flat_x, flat_y, shape = as_coordinate_pair(x, y)
        return simplex_noise_grid(self.permutation_table, flat_x, flat_y).reshape(shape)
