# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT


import numpy as np
from numba import njit

from burgers2d.models.base import require_linearization
from burgers2d.models.burgers import DT_UNBOUNDED

TEMPORAL_SCHEMES = ("explicit", "implicit")


@njit(cache=True)
def scatter_edge_fluxes(res, edges, fluxes):
    """res[i] -= F, res[j] += F for every face flux F oriented from i to j."""
    for k in range(edges.shape[0]):
        i = edges[k, 0]
        j = edges[k, 1]
        for c in range(fluxes.shape[1]):
            res[i, c] -= fluxes[k, c]
            res[j, c] += fluxes[k, c]
    return res


@njit(cache=True)
def scatter_boundary_fluxes(res, verts, fluxes):
    """res[v] -= F for every outward boundary face flux F."""
    for k in range(verts.shape[0]):
        v = verts[k]
        for c in range(fluxes.shape[1]):
            res[v, c] -= fluxes[k, c]
    return res


@njit(cache=True)
def vertex_min_bounds(n_verts, edges, edge_bounds):
    """Per-vertex minimum of the bounds of the incident faces."""
    out = np.full(n_verts, DT_UNBOUNDED)
    for k in range(edges.shape[0]):
        b = edge_bounds[k]
        i = edges[k, 0]
        j = edges[k, 1]
        if b < out[i]:
            out[i] = b
        if b < out[j]:
            out[j] = b
    return out


class FVSolver:
    """First-order vertex-centred finite-volume discretization.

    Semi-discrete form on each dual cell:

        dx_i/dt = -(1/V_i) * sum_f L_f * F_f + S_i

    with F_f the numerical flux on interior faces and the boundary flux on
    boundary faces.

    Parameters
    ----------
    mesh : RectMesh2d
    convective : ConvectiveModel
    source : SourceModel or None
    temporal : str
        ``"explicit"``. ``"implicit"`` is checked against the models'
        capabilities and refused at construction.
    """

    def __init__(self, mesh, convective, source=None, temporal="explicit"):
        if temporal not in TEMPORAL_SCHEMES:
            raise ValueError(f"Unknown temporal scheme: {temporal!r}")
        if temporal == "implicit":
            require_linearization(convective, "implicit time stepping")
            if source is not None:
                require_linearization(source, "implicit time stepping")
            raise NotImplementedError("implicit time stepping is not available in FVSolver")

        self.mesh = mesh
        self.convective = convective
        self.source = source
        self.temporal = temporal
        self._vert_ids = np.arange(mesh.n_verts())

    def residual(self, x):
        """Right-hand side dx/dt, shape (n_verts, 2)."""
        m = self.mesh
        x = np.asarray(x, dtype=np.float64)
        res = np.zeros_like(x)

        xi = x[m.edges[:, 0]]
        xj = x[m.edges[:, 1]]
        fluxes = self.convective.flux(xi, xj, m.normals) * m.lengths[:, np.newaxis]
        scatter_edge_fluxes(res, m.edges, fluxes)

        bdy_fluxes = (
            self.convective.boundary_flux(x[m.bdy_verts], m.bdy_tags, m.bdy_normals)
            * m.bdy_lengths[:, np.newaxis]
        )
        scatter_boundary_fluxes(res, m.bdy_verts, bdy_fluxes)

        res /= m.vols[:, np.newaxis]

        if self.source is not None and self.source.has_source():
            res += self.source.source(self._vert_ids, m.verts)
        return res

    def vertex_bounds(self, x):
        """Largest stable step for every vertex (faces and source)."""
        m = self.mesh
        x = np.asarray(x, dtype=np.float64)
        edge_bounds = np.asarray(
            self.convective.dt_max(x[m.edges[:, 0]], x[m.edges[:, 1]], m.h),
            dtype=np.float64,
        )
        bounds = vertex_min_bounds(m.n_verts(), m.edges, edge_bounds)
        if self.source is not None and self.source.has_source():
            bounds = np.minimum(bounds, self.source.source_dt_max(self._vert_ids, m.verts))
        return bounds

    def update_time_step(self, x, dt):
        """Run one reset/update/finalize cycle of the time step policy."""
        dt.reset()
        dt.update(self.vertex_bounds(x))
        dt.finalize()
        return dt

    def explicit_step(self, dt, x):
        """Forward Euler update of ``x`` in place."""
        res = self.residual(x)
        x += dt.values()[:, np.newaxis] * res
        return x

    def implicit_step(self, dt, x):
        """Refuse a backward Euler update; ``x`` is never touched.

        Raises NotImplementedError naming the missing linearization when a
        model lacks Jacobians, and otherwise because no implicit stepper
        ships with this solver.
        """
        require_linearization(self.convective, "implicit time stepping")
        if self.source is not None:
            require_linearization(self.source, "implicit time stepping")
        raise NotImplementedError("implicit time stepping is not available in FVSolver")
