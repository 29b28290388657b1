# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

# src/burgers2d/diagnostics.py
import numpy as np


def state_norms(x):
    """Euclidean norm of the state at every vertex."""
    x = np.asarray(x)
    return np.hypot(x[:, 0], x[:, 1])


def front_position(x, mesh, row=None):
    """x-position of the steepest drop of the first component along a row.

    Defaults to the middle lattice row. Returns None when the profile is
    flat.
    """
    if row is None:
        row = mesh.ny // 2
    u = np.asarray(x)[mesh.row(row), 0]
    du = np.diff(u)
    if not np.any(du < 0.0):
        return None
    k = int(np.argmin(du))
    return float(mesh.verts[mesh.row(row)[k], 0] + 0.5 * mesh.dx)


class StepDiagnostics:
    """Accumulate per-step state statistics over a run.

    Usage:
        diag = StepDiagnostics(mesh)
        for each step:
            diag.accumulate(x, t, dt)
        result = diag.finalize()
    """

    def __init__(self, mesh):
        self.mesh = mesh
        self.samples = []

    def accumulate(self, x, t, dt):
        """Store the statistics of one state snapshot."""
        norms = state_norms(x)
        self.samples.append({
            "time": t,
            "dt": dt,
            "max_norm": float(np.max(norms)),
            "min": np.min(x, axis=0).tolist(),
            "max": np.max(x, axis=0).tolist(),
            "finite": bool(np.all(np.isfinite(x))),
        })

    def finalize(self, x=None):
        """Summarise the run; ``x`` is the final state when available."""
        if not self.samples:
            raise RuntimeError("no samples accumulated")
        max_norms = [s["max_norm"] for s in self.samples]
        dts = [s["dt"] for s in self.samples]
        result = {
            "n_steps": len(self.samples),
            "final_time": self.samples[-1]["time"],
            "max_norm": float(np.max(max_norms)),
            "final_max_norm": max_norms[-1],
            "dt_min": float(np.min(dts)),
            "dt_max": float(np.max(dts)),
            "finite": all(s["finite"] for s in self.samples),
            "steps": self.samples,
        }
        if x is not None:
            result["front_position"] = front_position(x, self.mesh)
        return result
