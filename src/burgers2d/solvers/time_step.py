# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

"""Time step policies consumed by the explicit solver.

A policy goes through one cycle per step:

    dt.reset()            # running bound <- DT_UNBOUNDED
    dt.update(bounds)     # zero or more times, min-reduction
    dt.finalize()
    dt.min(), dt.max()    # step to use

``FixedTimeStep`` always answers its configured value and only tracks
the bound to report the effective CFL number. ``CFLTimeStep`` answers
``cfl * bound``.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from burgers2d.models.burgers import DT_UNBOUNDED

logger = logging.getLogger(__name__)

TIME_STEP_TOL = 1e-8

IDLE = "idle"
ACCUMULATING = "accumulating"
FINALIZED = "finalized"


class StepMismatchError(ValueError):
    """A fixed time step was asked to take a different value."""


def _chunk_min(chunk):
    chunk = np.asarray(chunk, dtype=np.float64)
    if chunk.size == 0:
        return DT_UNBOUNDED
    return float(np.min(chunk))


def partitioned_min(chunks, max_workers=None):
    """Minimum over a collection of chunks.

    Each chunk is reduced on its own (on a thread pool when
    ``max_workers`` > 1) and the partial minima are combined once at the
    end. Returns DT_UNBOUNDED for an empty collection.
    """
    chunks = list(chunks)
    if max_workers is not None and max_workers > 1 and len(chunks) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            partials = list(pool.map(_chunk_min, chunks))
    else:
        partials = [_chunk_min(c) for c in chunks]
    return min(partials, default=DT_UNBOUNDED)


def split_chunks(values, n_chunks):
    """Split a flat array of bounds into ``n_chunks`` contiguous chunks."""
    values = np.asarray(values, dtype=np.float64).ravel()
    n_chunks = max(1, min(int(n_chunks), values.size))
    return np.array_split(values, n_chunks)


class TimeStep(ABC):
    """Common reduction state for the time step policies.

    Parameters
    ----------
    n_verts : int
        Number of vertices the per-vertex step array covers.
    max_workers : int or None
        Threads used for the chunk partial minima (None or 1: serial).
    n_chunks : int or None
        Chunks a flat bound array is split into. Defaults to
        ``max_workers``.
    """

    def __init__(self, n_verts, max_workers=None, n_chunks=None):
        if n_verts < 1:
            raise ValueError(f"n_verts must be >= 1, got {n_verts}")
        self.n_verts = n_verts
        self.max_workers = max_workers
        self.n_chunks = n_chunks or max_workers or 1
        self.dt_min = DT_UNBOUNDED
        self.state = IDLE

    def reset(self):
        self.dt_min = DT_UNBOUNDED
        self.state = ACCUMULATING

    def update(self, values):
        """Fold per-entity step bounds into the running minimum.

        ``values`` is either a flat array of bounds or a list of chunk
        arrays produced elsewhere. The running minimum is written once,
        after all partial minima are known.
        """
        if self.state != ACCUMULATING:
            raise RuntimeError(
                f"time step update called while {self.state}; call reset() first"
            )
        if isinstance(values, (list, tuple)):
            chunks = values
        else:
            chunks = split_chunks(values, self.n_chunks)
        self.dt_min = min(self.dt_min, partitioned_min(chunks, self.max_workers))

    def finalize(self):
        self.state = FINALIZED

    def values(self):
        """Per-vertex step sizes for the next update."""
        return np.full(self.n_verts, self.min())

    @abstractmethod
    def is_constant(self):
        pass

    @abstractmethod
    def set(self, val):
        pass

    @abstractmethod
    def min(self):
        pass

    @abstractmethod
    def max(self):
        pass


class FixedTimeStep(TimeStep):
    """Constant step; ``set`` refuses any other value."""

    def __init__(self, dt, n_verts, max_workers=None, n_chunks=None):
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        super().__init__(n_verts, max_workers=max_workers, n_chunks=n_chunks)
        self.dt = dt

    def __str__(self):
        return f"{self.dt:.2e} (cfl={self.dt / self.dt_min:.2e})"

    def is_constant(self):
        return True

    def set(self, val):
        if abs(self.dt - val) > TIME_STEP_TOL:
            raise StepMismatchError(
                f"fixed time step {self.dt:.2e} cannot be set to {val:.2e}"
            )

    def min(self):
        return self.dt

    def max(self):
        return self.dt


class CFLTimeStep(TimeStep):
    """Global step ``cfl * min(bounds)``, recomputed every cycle.

    ``set`` overrides the computed value until the next ``reset``, e.g. to
    land exactly on a final or save time.
    """

    def __init__(self, cfl, n_verts, max_workers=None, n_chunks=None):
        if cfl <= 0:
            raise ValueError(f"cfl must be positive, got {cfl}")
        super().__init__(n_verts, max_workers=max_workers, n_chunks=n_chunks)
        self.cfl = cfl
        self.forced = None

    def __str__(self):
        return f"{self.min():.2e} (cfl={self.min() / self.dt_min:.2e})"

    def reset(self):
        super().reset()
        self.forced = None

    def is_constant(self):
        return False

    def set(self, val):
        if not val > 0:
            raise ValueError(f"time step must be positive, got {val}")
        logger.debug("time step forced to %.3e (computed %.3e)", val, self.cfl * self.dt_min)
        self.forced = val

    def min(self):
        if self.forced is not None:
            return self.forced
        return min(self.cfl * self.dt_min, DT_UNBOUNDED)

    def max(self):
        return self.min()
