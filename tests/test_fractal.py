import numpy as np
import pytest

from terrain_generator.fractal import fbm, fbm_2d, fbm_grid, fbm_noise_grid, fbm_octave_terms
from terrain_generator.noise import SimplexNoise2D


@pytest.fixture
def noise():
    return SimplexNoise2D(seed=12345)


def test_no_octaves_gives_zero(noise):
    assert fbm(noise, 1.25, 3.5, 0, 2.0, 0.5) == 0.0
    assert fbm(noise, 1.25, 3.5, -3, 2.0, 0.5) == 0.0


def test_single_octave_is_plain_noise(noise):
    assert fbm(noise, 1.25, 3.5, 1, 2.0, 0.5) == noise.noise(1.25, 3.5)


def test_octave_terms_sum_to_fbm(noise):
    perm = noise.permutation_table
    terms = fbm_octave_terms(perm, 4.2, -7.9, 6, 2.0, 0.5)

    assert terms.shape == (6,)
    assert terms.sum() == pytest.approx(fbm_2d(perm, 4.2, -7.9, 6, 2.0, 0.5), abs=1e-12)
    assert terms[0] == noise.noise(4.2, -7.9)


def test_octave_contributions_decay(noise, rng):
    perm = noise.permutation_table
    points = rng.uniform(-50.0, 50.0, (2000, 2))
    terms = np.array([fbm_octave_terms(perm, x, y, 6, 2.0, 0.5) for x, y in points])

    max_per_octave = np.max(np.abs(terms), axis=0)
    assert np.all(np.diff(max_per_octave) < 0.0)


def test_fbm_is_deterministic(noise):
    again = SimplexNoise2D(seed=12345)
    assert fbm(noise, 10.0, 10.0, 5, 2.0, 0.5) == fbm(again, 10.0, 10.0, 5, 2.0, 0.5)


def test_fbm_grid_matches_scalar(noise, rng):
    xs = rng.uniform(-20.0, 20.0, (3, 7))
    ys = rng.uniform(-20.0, 20.0, (3, 7))
    grid = fbm_grid(noise.permutation_table, xs, ys, 4, 2.0, 0.5)

    assert grid.shape == (3, 7)
    for index in np.ndindex(xs.shape):
        assert grid[index] == pytest.approx(fbm(noise, xs[index], ys[index], 4, 2.0, 0.5), rel=1e-12, abs=1e-15)
    assert np.array_equal(grid, fbm_noise_grid(noise, xs, ys, 4, 2.0, 0.5))


def test_fbm_sum_is_not_renormalized(noise, rng):
    # Slow decay makes the raw sum overshoot [-1, 1]; FBM must not hide that.
    points = rng.uniform(-100.0, 100.0, (2000, 2))
    values = fbm_noise_grid(noise, points[:, 0], points[:, 1], 8, 2.0, 0.9)

    assert np.max(np.abs(values)) > 1.0


def test_grid_rejects_mismatched_shapes(noise):
    with pytest.raises(ValueError):
        fbm_noise_grid(noise, np.linspace(0.0, 50.0, 2000), np.zeros(3), 4, 2.0, 0.5)


def test_grid_kernel_rejects_mismatched_sizes(noise):
    with pytest.raises(ValueError):
        fbm_grid(noise.permutation_table, np.linspace(0.0, 50.0, 2000), np.zeros(3), 4, 2.0, 0.5)


def test_grid_of_scalars_is_zero_dimensional(noise):
    value = fbm_noise_grid(noise, 3.25, 7.5, 4, 2.0, 0.5)

    assert value.shape == ()
    assert float(value) == pytest.approx(fbm(noise, 3.25, 7.5, 4, 2.0, 0.5), rel=1e-12, abs=1e-15)
