# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT


import sys

import numpy as np

from burgers2d.models.base import ConvectiveModel, SourceModel

# Returned by step bounds when no wave moves; combined by min with the rest.
# Source magnitudes are clipped to it as well, so exp(mu1*x) never reaches inf.
# Fluxes are not clipped: states near sqrt(DT_UNBOUNDED) overflow them.
DT_UNBOUNDED = sys.float_info.max

TAG_YMIN = 1
TAG_XMAX = 2
TAG_YMAX = 3
TAG_XMIN = 4
BOUNDARY_NAMES = {TAG_YMIN: "ymin", TAG_XMAX: "xmax", TAG_YMAX: "ymax", TAG_XMIN: "xmin"}

SOURCE_AMPLITUDE = 0.02


def _column(a):
    return np.asarray(a)[..., np.newaxis]


def _normal_velocity(x, n):
    return x[..., 0] * n[..., 0] + x[..., 1] * n[..., 1]


def _bounded_ratio(num, den):
    """num / den where den > 0, DT_UNBOUNDED elsewhere; always finite."""
    num, den = np.broadcast_arrays(np.asarray(num, dtype=np.float64),
                                   np.asarray(den, dtype=np.float64))
    out = np.full(den.shape, DT_UNBOUNDED)
    with np.errstate(over="ignore"):
        np.divide(num, den, out=out, where=den > 0.0)
    out = np.minimum(out, DT_UNBOUNDED)
    if out.ndim == 0:
        return float(out)
    return out


def physical_flux(x, n):
    """Normal-projected flux of the vector Burgers system.

    For x = (u, v) and un = u*nx + v*ny the flux is (0.5*u*un, 0.5*v*un).
    The normal is used as given, not renormalized.
    """
    x = np.asarray(x, dtype=np.float64)
    n = np.asarray(n, dtype=np.float64)
    return 0.5 * x * _column(_normal_velocity(x, n))


def wave_speed(x):
    """Local maximum characteristic speed, 0.5 * |x|.

    Not verified against the eigenvalues of the flux Jacobian; kept as is.
    """
    x = np.asarray(x, dtype=np.float64)
    return 0.5 * np.hypot(x[..., 0], x[..., 1])


def numerical_flux(xi, xj, n):
    """Rusanov (local Lax-Friedrichs) flux from side i to side j.

    F = 0.5*(f(xi) + f(xj)) - 0.5*max(lambda_i, lambda_j)*(xj - xi)
    """
    xi = np.asarray(xi, dtype=np.float64)
    xj = np.asarray(xj, dtype=np.float64)
    lam = np.maximum(wave_speed(xi), wave_speed(xj))
    return (0.5 * (physical_flux(xi, n) + physical_flux(xj, n))
            - 0.5 * _column(lam) * (xj - xi))


def max_stable_step(xi, xj, h):
    """CFL bound h / max(lambda_i, lambda_j) for a face of length scale h."""
    lam = np.maximum(wave_speed(xi), wave_speed(xj))
    return _bounded_ratio(h, lam)


def ghost_state(xi, tag, n, inflow_value):
    """Exterior state seen by a boundary face.

    Only faces where the flow enters (xi . n < 0) are affected: ``ymin``
    becomes a zero state and ``xmax`` the prescribed ``(inflow_value, 0)``.
    Everything else is extrapolated from the interior.
    """
    xi, n = np.broadcast_arrays(np.asarray(xi, dtype=np.float64),
                                np.asarray(n, dtype=np.float64))
    tag = np.asarray(tag)
    inflow = _normal_velocity(xi, n) < 0.0

    ghost = xi.copy()
    ghost[inflow & (tag == TAG_YMIN)] = 0.0
    ghost[inflow & (tag == TAG_XMAX)] = (inflow_value, 0.0)
    return ghost


class BurgersTestCase(ConvectiveModel, SourceModel):
    """Vector Burgers test case with exponential forcing in x.

    Parameters
    ----------
    mu : sequence of 2 floats
        ``mu[0]`` is the inflow value on ``xmax``, ``mu[1]`` the growth
        rate of the source 0.02*exp(mu[1]*x).
    """

    def __init__(self, mu):
        mu = tuple(float(m) for m in mu)
        if len(mu) != 2:
            raise ValueError(f"mu must hold exactly 2 coefficients, got {len(mu)}")
        self.mu = mu

    def initial(self, n_verts):
        """Uniform (1, 1) state."""
        return np.ones((n_verts, 2))

    def ext_state(self, tag, xi, n):
        return ghost_state(xi, tag, n, self.mu[0])

    def flux(self, xi, xj, n):
        return numerical_flux(xi, xj, n)

    def boundary_flux(self, xi, tag, n):
        # One-sided: physical flux of the ghost state only.
        return physical_flux(self.ext_state(tag, xi, n), n)

    def dt_max(self, xi, xj, h):
        return max_stable_step(xi, xj, h)

    def has_source(self):
        return True

    def _source_x(self, p):
        p = np.asarray(p, dtype=np.float64)
        with np.errstate(over="ignore"):
            sx = SOURCE_AMPLITUDE * np.exp(self.mu[1] * p[..., 0])
        return np.minimum(sx, DT_UNBOUNDED)

    def source(self, i, p):
        """Forcing on the first component; ``i`` is the vertex index."""
        sx = self._source_x(p)
        out = np.zeros(np.shape(sx) + (2,))
        out[..., 0] = sx
        return out

    def source_dt_max(self, i, p):
        return _bounded_ratio(1.0, np.abs(self._source_x(p)))
