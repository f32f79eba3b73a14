# terrain_generator/fractal.py

"""
================================================================================
FRACTAL NOISE (FBM)
================================================================================
Sums several octaves of simplex noise at increasing frequency and decreasing
amplitude.

Data Contract:
---------------
- Inputs:
    - perm: The permutation table of a SimplexNoise2D instance (kernels), or
      the SimplexNoise2D instance itself (fbm / fbm_noise_grid).
    - x, y: Scalar coordinates, or NumPy arrays of coordinates.
    - octaves, lacunarity, gain: Standard fractal parameters.
- Outputs:
    - The raw octave sum. It is NOT renormalized: with gain < 1 it stays
      close to [-1, 1] but is not bounded by it.
- Side Effects: None.
- Invariants: Every call evaluates exactly `octaves` octaves. There is no
  early exit, so the cost and the result are the same for every call.
================================================================================
"""

import numpy as np
from numba import njit

from .noise import SimplexNoise2D, as_coordinate_pair, simplex_noise_2d


@njit
def fbm_2d(perm, x, y, octaves, lacunarity, gain):
    """Fractal sum at a single point. Non-positive octave counts give 0."""
    total = 0.0
    amplitude = 1.0
    frequency = 1.0

    for _ in range(octaves):
        total += simplex_noise_2d(perm, x * frequency, y * frequency) * amplitude
        frequency *= lacunarity
        amplitude *= gain

    return total


@njit
def fbm_octave_terms(perm, x, y, octaves, lacunarity, gain):
    """
    Returns each octave's weighted contribution separately. The terms sum
    to fbm_2d() for the same arguments.
    """
    terms = np.zeros(max(octaves, 0))
    amplitude = 1.0
    frequency = 1.0

    for octave in range(octaves):
        terms[octave] = simplex_noise_2d(perm, x * frequency, y * frequency) * amplitude
        frequency *= lacunarity
        amplitude *= gain

    return terms


@njit
def fbm_grid(perm, x, y, octaves, lacunarity, gain):
    """Fractal sum for every element of two same-shaped arrays."""
    if x.size != y.size:
        raise ValueError("Coordinate arrays must have the same number of elements.")
    flat_x = x.ravel()
    flat_y = y.ravel()
    out = np.empty(flat_x.size)
    for k in range(flat_x.size):
        out[k] = fbm_2d(perm, flat_x[k], flat_y[k], octaves, lacunarity, gain)
    return out.reshape(x.shape)


def fbm(noise: SimplexNoise2D, x: float, y: float, octaves: int, lacunarity: float, gain: float) -> float:
    return float(fbm_2d(noise.permutation_table, float(x), float(y), int(octaves), float(lacunarity), float(gain)))


def fbm_noise_grid(noise: SimplexNoise2D, x, y, octaves: int, lacunarity: float, gain: float) -> np.ndarray:
    """
    Fractal sum over same-shaped coordinate arrays using a noise generator's
    current table. The output has the shape of the inputs.

    Raises:
        ValueError: If x and y differ in shape.
    """
    flat_x, flat_y, shape = as_coordinate_pair(x, y)
    return fbm_grid(
        noise.permutation_table, flat_x, flat_y,
        int(octaves), float(lacunarity), float(gain)
    ).reshape(shape)
