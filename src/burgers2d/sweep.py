# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

# src/burgers2d/sweep.py
import logging
import numpy as np
from itertools import product
from concurrent.futures import ProcessPoolExecutor, as_completed
from burgers2d.mesh import RectMesh2d
from burgers2d.models.burgers import BurgersTestCase, BOUNDARY_NAMES
from burgers2d.solvers.explicit import FVSolver
from burgers2d.solvers.time_step import FixedTimeStep, CFLTimeStep, TIME_STEP_TOL
from burgers2d.diagnostics import StepDiagnostics

logger = logging.getLogger(__name__)

DEFAULT_CASE = dict(lx=100.0, ly=100.0, nx=250, ny=250, tf=25.0)


def make_time_step(params, n_verts):
    """Fixed step tf/n_steps, or CFL-adaptive step, from a params dict."""
    n_steps = params.get("n_steps")
    cfl = params.get("cfl")
    if (n_steps is None) == (cfl is None):
        raise ValueError("exactly one of n_steps and cfl must be given")
    workers = params.get("reduce_workers")
    if n_steps is not None:
        if n_steps < 1:
            raise ValueError(f"n_steps must be >= 1, got {n_steps}")
        return FixedTimeStep(params["tf"] / n_steps, n_verts, max_workers=workers)
    return CFLTimeStep(cfl, n_verts, max_workers=workers)


def run_case(params):
    """Run one Burgers case from the uniform (1, 1) state to ``tf``.

    Args:
        params: dict with mu, lx, ly, nx, ny, tf and either n_steps or cfl.
            Optional: max_steps, reduce_workers, store_fields, temporal.

    Returns:
        dict with params, boundary names, per-step diagnostics and summary.
    """
    p = dict(DEFAULT_CASE)
    p.update(params)
    tf = p["tf"]
    max_steps = p.get("max_steps", 100000)

    mesh = RectMesh2d(p["lx"], p["nx"], p["ly"], p["ny"])
    test = BurgersTestCase(p["mu"])
    solver = FVSolver(mesh, test, test, temporal=p.get("temporal", "explicit"))
    dt = make_time_step(p, mesh.n_verts())

    x = test.initial(mesh.n_verts())
    diag = StepDiagnostics(mesh)

    t = 0.0
    i = 0
    while tf - t > TIME_STEP_TOL:
        if i >= max_steps:
            raise RuntimeError(f"reached max_steps={max_steps} at t = {t:.2e} < tf = {tf:.2e}")
        solver.update_time_step(x, dt)
        remaining = tf - t
        if dt.min() > remaining:
            dt.set(remaining)
        solver.explicit_step(dt, x)
        if not np.all(np.isfinite(x)):
            raise RuntimeError(f"non-finite state after iteration {i + 1} (t = {t:.2e})")
        t += dt.min()
        i += 1
        logger.info("Iteration %d: t = %.2e, time_step = %s", i, t, dt)
        diag.accumulate(x, t, dt.min())

    result = diag.finalize(x)
    result["params"] = {"mu0": test.mu[0], "mu1": test.mu[1]}
    result["mesh"] = {k: p[k] for k in ["lx", "ly", "nx", "ny"]}
    result["names"] = {name: tag for tag, name in BOUNDARY_NAMES.items()}
    if p.get("store_fields", False):
        result["fields"] = {"u": x[:, 0], "v": x[:, 1]}
    return result


def build_sweep_grid(mu0_vals, mu1_vals, lx=100.0, ly=100.0, nx=250, ny=250,
                     tf=25.0, n_steps=None, cfl=None):
    """Build list of parameter dicts for a full sweep over mu."""
    grid = []
    for mu0, mu1 in product(mu0_vals, mu1_vals):
        grid.append(dict(
            mu=(mu0, mu1),
            lx=lx, ly=ly, nx=nx, ny=ny, tf=tf, n_steps=n_steps, cfl=cfl,
        ))
    return grid


def run_sweep(param_list, max_workers=None, progress=True):
    """Run parameter sweep in parallel.

    Args:
        param_list: list of param dicts from build_sweep_grid.
        max_workers: number of parallel processes (None = cpu count).
        progress: show tqdm progress bar if available.

    Returns:
        list of result dicts, in the same order as param_list.
    """
    n = len(param_list)
    logger.info("Starting sweep: %d cases, max_workers=%s", n, max_workers)

    # Soft import of tqdm
    tqdm_bar = None
    if progress:
        try:
            from tqdm.auto import tqdm
            tqdm_bar = tqdm(total=n, desc="Sweep", unit="case")
        except ImportError:
            pass

    results = [None] * n

    with ProcessPoolExecutor(max_workers=max_workers) as pool:
        future_to_index = {}
        for i, params in enumerate(param_list):
            future = pool.submit(run_case, params)
            future_to_index[future] = i

        for future in as_completed(future_to_index):
            idx = future_to_index[future]
            results[idx] = future.result()
            p = results[idx]["params"]
            logger.debug(
                "Case %d/%d done: mu0=%s mu1=%s -> max_norm=%.3e",
                idx + 1, n, p["mu0"], p["mu1"], results[idx]["max_norm"],
            )
            if tqdm_bar is not None:
                tqdm_bar.update(1)

    if tqdm_bar is not None:
        tqdm_bar.close()

    logger.info("Sweep complete: %d cases finished", n)
    return results
