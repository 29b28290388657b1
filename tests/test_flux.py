# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

import sys

import numpy as np
from burgers2d.models.burgers import (
    physical_flux,
    wave_speed,
    numerical_flux,
    max_stable_step,
    DT_UNBOUNDED,
)


def _random_pairs(n=200, seed=0):
    rng = np.random.default_rng(seed)
    xi = rng.uniform(-5.0, 5.0, size=(n, 2))
    xj = rng.uniform(-5.0, 5.0, size=(n, 2))
    theta = rng.uniform(0.0, 2 * np.pi, size=n)
    n_ = np.column_stack([np.cos(theta), np.sin(theta)])
    return xi, xj, n_


def test_physical_flux_values():
    """f((2, 1), (1, 0)) = (0.5*2*2, 0.5*1*2)."""
    f = physical_flux([2.0, 1.0], [1.0, 0.0])
    assert np.allclose(f, [2.0, 1.0])


def test_physical_flux_uses_normal_as_given():
    """A normal of length 2 doubles the flux (no renormalization)."""
    x = np.array([1.5, -0.5])
    n = np.array([0.6, 0.8])
    assert np.allclose(physical_flux(x, 2.0 * n), 2.0 * physical_flux(x, n))


def test_wave_speed_is_half_norm():
    """Documented (unverified) formula: 0.5 * |x|."""
    assert np.isclose(wave_speed([3.0, 4.0]), 2.5)
    assert np.allclose(wave_speed([[3.0, 4.0], [0.0, 0.0]]), [2.5, 0.0])


def test_consistency():
    """F(x, x, n) == f(x, n)."""
    xi, _, n = _random_pairs()
    assert np.allclose(numerical_flux(xi, xi, n), physical_flux(xi, n), atol=1e-12)


def test_antisymmetry():
    """F(xi, xj, n) == -F(xj, xi, -n)."""
    xi, xj, n = _random_pairs(seed=1)
    assert np.allclose(numerical_flux(xi, xj, n), -numerical_flux(xj, xi, -n), atol=1e-12)


def test_rusanov_single_face():
    """Hand-computed Rusanov flux for one face."""
    xi = np.array([1.0, 0.0])
    xj = np.array([3.0, 4.0])
    n = np.array([1.0, 0.0])
    # f(xi) = (0.5, 0), f(xj) = (4.5, 6), lambda = max(0.5, 2.5) = 2.5
    expected = 0.5 * np.array([5.0, 6.0]) - 0.5 * 2.5 * np.array([2.0, 4.0])
    assert np.allclose(numerical_flux(xi, xj, n), expected)


def test_flux_finite_for_shock_states():
    """Large jumps still give finite fluxes."""
    xi = np.array([[1e6, -1e6], [0.0, 0.0]])
    xj = np.array([[-1e6, 1e6], [1e-300, 0.0]])
    n = np.array([[1.0, 0.0], [0.0, 1.0]])
    assert np.all(np.isfinite(numerical_flux(xi, xj, n)))


def test_max_stable_step():
    """h / max(lambda_i, lambda_j)."""
    dt = max_stable_step([3.0, 4.0], [1.0, 0.0], 0.5)
    assert np.isclose(dt, 0.5 / 2.5)
    assert isinstance(dt, float)


def test_max_stable_step_zero_speed():
    """Both states at rest -> unbounded sentinel, not a division error."""
    assert max_stable_step([0.0, 0.0], [0.0, 0.0], 1.0) == DT_UNBOUNDED
    assert DT_UNBOUNDED == sys.float_info.max


def test_max_stable_step_tiny_speed_is_finite():
    """Subnormal speeds clip to the sentinel instead of overflowing to inf."""
    xi = np.array([[1e-310, 0.0], [1.0, 0.0]])
    xj = np.zeros((2, 2))
    dt = max_stable_step(xi, xj, np.array([10.0, 10.0]))
    assert np.all(np.isfinite(dt))
    assert dt[0] == DT_UNBOUNDED
    assert np.isclose(dt[1], 20.0)
