# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

# tests/test_integration.py
import numpy as np
import pytest
from burgers2d.sweep import run_case, build_sweep_grid, make_time_step
from burgers2d.solvers.time_step import FixedTimeStep, CFLTimeStep
from burgers2d.io import save_run, load_run


def _small_case(**kw):
    params = dict(mu=(4.3, 0.021), lx=10.0, ly=10.0, nx=9, ny=9, tf=0.5, n_steps=10)
    params.update(kw)
    return params


def test_end_to_end_fixed_step():
    """Full pipeline: mesh -> solver -> fixed steps -> diagnostics."""
    result = run_case(_small_case())

    assert result["n_steps"] == 10
    assert np.isclose(result["final_time"], 0.5)
    assert result["finite"]
    assert result["params"] == {"mu0": 4.3, "mu1": 0.021}
    assert result["names"] == {"ymin": 1, "xmax": 2, "ymax": 3, "xmin": 4}
    assert np.isclose(result["dt_min"], 0.05)
    assert np.isclose(result["dt_max"], 0.05)
    assert "fields" not in result


def test_end_to_end_cfl_lands_on_final_time():
    """The adaptive step is clamped so the run ends exactly at tf."""
    result = run_case(_small_case(n_steps=None, cfl=0.2, tf=1.0))
    assert np.isclose(result["final_time"], 1.0, atol=1e-12)
    assert result["dt_min"] <= result["dt_max"]
    assert result["finite"]


def test_norm_bounded_by_source_growth():
    """Flux terms alone never increase the state norm from a uniform start."""
    params = _small_case()
    result = run_case(params)
    smax = 0.02 * np.exp(0.021 * params["lx"])
    assert result["max_norm"] <= np.sqrt(2.0) + params["tf"] * smax + 1e-12


def test_store_fields():
    result = run_case(_small_case(store_fields=True))
    assert result["fields"]["u"].shape == (81,)
    assert result["fields"]["v"].shape == (81,)


def test_implicit_request_stops_run():
    with pytest.raises(NotImplementedError):
        run_case(_small_case(temporal="implicit"))


def test_max_steps_guard():
    with pytest.raises(RuntimeError, match="max_steps"):
        run_case(_small_case(n_steps=None, cfl=1e-3, max_steps=3))


def test_make_time_step():
    assert isinstance(make_time_step(dict(tf=1.0, n_steps=4), 10), FixedTimeStep)
    assert isinstance(make_time_step(dict(tf=1.0, cfl=0.3), 10), CFLTimeStep)
    assert make_time_step(dict(tf=1.0, n_steps=4), 10).min() == 0.25
    with pytest.raises(ValueError):
        make_time_step(dict(tf=1.0), 10)
    with pytest.raises(ValueError):
        make_time_step(dict(tf=1.0, n_steps=4, cfl=0.3), 10)


def test_end_to_end_save_load(tmp_path):
    """Full pipeline through save/load."""
    result = run_case(_small_case(store_fields=True))
    path = str(tmp_path / "test_run.json")
    save_run(result, path)
    loaded = load_run(path)
    assert loaded["n_steps"] == result["n_steps"]
    assert np.allclose(loaded["fields"]["u"], result["fields"]["u"])


def test_mini_sweep():
    """A 2x2 sweep over mu should produce 4 results."""
    grid = build_sweep_grid(
        mu0_vals=[1.0, 4.3],
        mu1_vals=[0.0, 0.021],
        lx=10.0, ly=10.0, nx=7, ny=7, tf=0.2, n_steps=4,
    )
    assert len(grid) == 4
    # Run sequentially (no multiprocessing in test)
    results = [run_case(p) for p in grid]
    assert len(results) == 4
    assert all(r["finite"] for r in results)
