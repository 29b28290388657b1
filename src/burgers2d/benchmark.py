# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

"""Benchmarking utilities for profiling burgers2d hot paths.

Provides both micro-benchmarks (flux kernels, residual, reduction) and a
macro-benchmark (a short run_case) with timing and optional cProfile output.
"""

import time
import cProfile
import pstats
import io
import numpy as np


def _make_test_data(n=64, mu=(4.3, 0.021)):
    """Mesh, model and a non-uniform state for benchmarking."""
    from burgers2d.mesh import RectMesh2d
    from burgers2d.models.burgers import BurgersTestCase
    mesh = RectMesh2d(100.0, n, 100.0, n)
    test = BurgersTestCase(mu)
    x = test.initial(mesh.n_verts())
    x[:, 0] += np.exp(-((mesh.verts[:, 0] - 50.0) / 10.0) ** 2)
    return mesh, test, x


def _time_fn(fn, args=(), kwargs=None, n_warmup=3, n_iter=100):
    """Time a function over n_iter calls, returning median and stats."""
    kwargs = kwargs or {}
    for _ in range(n_warmup):
        fn(*args, **kwargs)
    times = []
    for _ in range(n_iter):
        t0 = time.perf_counter_ns()
        fn(*args, **kwargs)
        t1 = time.perf_counter_ns()
        times.append((t1 - t0) * 1e-6)  # ms
    times = np.array(times)
    return {
        "median_ms": float(np.median(times)),
        "mean_ms": float(np.mean(times)),
        "std_ms": float(np.std(times)),
        "min_ms": float(np.min(times)),
        "max_ms": float(np.max(times)),
        "n_iter": n_iter,
    }


def bench_numerical_flux(n=64, n_iter=500):
    """Benchmark the Rusanov flux over all interior faces."""
    from burgers2d.models.burgers import numerical_flux
    mesh, _, x = _make_test_data(n)
    xi = x[mesh.edges[:, 0]]
    xj = x[mesh.edges[:, 1]]
    return _time_fn(numerical_flux, args=(xi, xj, mesh.normals), n_iter=n_iter)


def bench_boundary_flux(n=64, n_iter=500):
    """Benchmark ghost resolution + boundary flux over all boundary faces."""
    mesh, test, x = _make_test_data(n)
    xb = x[mesh.bdy_verts]
    return _time_fn(test.boundary_flux, args=(xb, mesh.bdy_tags, mesh.bdy_normals),
                    n_iter=n_iter)


def bench_residual(n=64, n_iter=200):
    """Benchmark one FVSolver.residual() call."""
    from burgers2d.solvers.explicit import FVSolver
    mesh, test, x = _make_test_data(n)
    solver = FVSolver(mesh, test, test)
    return _time_fn(solver.residual, args=(x,), n_iter=n_iter)


def bench_time_step_reduction(n=64, n_iter=200, max_workers=None):
    """Benchmark a CFL time step cycle over the vertex bounds."""
    from burgers2d.solvers.explicit import FVSolver
    from burgers2d.solvers.time_step import CFLTimeStep
    mesh, test, x = _make_test_data(n)
    solver = FVSolver(mesh, test, test)
    dt = CFLTimeStep(0.1, mesh.n_verts(), max_workers=max_workers)
    return _time_fn(solver.update_time_step, args=(x, dt), n_iter=n_iter)


def bench_run_case(n=32, n_steps=20):
    """Time a short run_case (macro benchmark)."""
    from burgers2d.sweep import run_case
    params = dict(mu=(4.3, 0.021), lx=100.0, ly=100.0, nx=n, ny=n,
                  tf=0.5, n_steps=n_steps)
    t0 = time.perf_counter()
    result = run_case(params)
    elapsed = time.perf_counter() - t0
    return {
        "elapsed_s": elapsed,
        "n_steps": result["n_steps"],
        "max_norm": result["max_norm"],
    }


def profile_run_case(n=32, n_steps=20):
    """Run cProfile on run_case, return stats as string."""
    from burgers2d.sweep import run_case
    params = dict(mu=(4.3, 0.021), lx=100.0, ly=100.0, nx=n, ny=n,
                  tf=0.5, n_steps=n_steps)
    pr = cProfile.Profile()
    pr.enable()
    run_case(params)
    pr.disable()
    s = io.StringIO()
    ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
    ps.print_stats(30)
    return s.getvalue()


def run_all_benchmarks(n=64, verbose=True):
    """Run all micro and macro benchmarks. Returns dict of results."""
    results = {}

    benches = [
        ("numerical_flux", bench_numerical_flux),
        ("boundary_flux", bench_boundary_flux),
        ("residual", bench_residual),
        ("time_step_reduction", bench_time_step_reduction),
    ]

    for name, fn in benches:
        if verbose:
            print(f"  {name}...", end="", flush=True)
        r = fn(n=n)
        results[name] = r
        if verbose:
            print(f" {r['median_ms']:.3f} ms (median, n={r['n_iter']})")

    if verbose:
        print(f"  run_case (n=32, 20 steps)...", end="", flush=True)
    r = bench_run_case(n=32, n_steps=20)
    results["run_case"] = r
    if verbose:
        print(f" {r['elapsed_s']:.2f} s")

    return results


def compare_results(before, after):
    """Print a comparison table of two benchmark result sets."""
    print(f"\n{'Benchmark':<22} {'Before':>10} {'After':>10} {'Speedup':>10}")
    print("-" * 55)
    for key in before:
        if key == "run_case":
            b = before[key]["elapsed_s"]
            a = after[key]["elapsed_s"]
            speedup = b / a if a > 0 else float("inf")
            print(f"{key:<22} {b:>9.2f}s {a:>9.2f}s {speedup:>9.1f}x")
        else:
            b = before[key]["median_ms"]
            a = after[key]["median_ms"]
            speedup = b / a if a > 0 else float("inf")
            print(f"{key:<22} {b:>8.3f}ms {a:>8.3f}ms {speedup:>9.1f}x")


if __name__ == "__main__":
    print("=" * 55)
    print("burgers2d Benchmarks")
    print("=" * 55)
    print()

    print("cProfile of run_case (n=32, 20 steps):")
    print(profile_run_case())

    print("Micro-benchmarks (n=64):")
    run_all_benchmarks(n=64)
