# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

import json
import logging
import os

from burgers2d.sweep import run_case, build_sweep_grid
from burgers2d.sweep_utils import (
    save_sweep_results,
    load_sweep_summary,
    configure_logging,
    print_summary_table,
)


def _results():
    grid = build_sweep_grid([2.0, 4.3], [0.021], lx=10.0, ly=10.0, nx=7, ny=7,
                            tf=0.2, n_steps=4)
    return [run_case(p) for p in grid]


def test_save_and_load_summary(tmp_path):
    rows = save_sweep_results(_results(), str(tmp_path))
    assert len(rows) == 2
    assert os.path.exists(tmp_path / "summary.csv")
    assert os.path.exists(tmp_path / "mu0_4.3_mu1_0.021.json")

    loaded = load_sweep_summary(str(tmp_path / "summary.csv"))
    assert [r["mu0"] for r in loaded] == [2.0, 4.3]
    assert all(r["n_steps"] == 4 for r in loaded)
    assert all(isinstance(r["max_norm"], float) for r in loaded)


def test_step_manifest(tmp_path):
    save_sweep_results(_results(), str(tmp_path))
    with open(tmp_path / "mu0_2.0_mu1_0.021_steps.json") as f:
        manifest = json.load(f)
    assert manifest["names"] == {"ymin": 1, "xmax": 2, "ymax": 3, "xmin": 4}
    assert len(manifest["steps"]) == 4
    assert set(manifest["steps"][0]) == {"time", "dt", "max_norm"}


def test_configure_logging(tmp_path):
    logger = configure_logging(str(tmp_path), "unit")
    try:
        logging.getLogger("burgers2d.sweep").info("hello from the sweep")
        for h in logger.handlers:
            h.flush()
        with open(tmp_path / "unit.log") as f:
            assert "hello from the sweep" in f.read()
    finally:
        for h in list(logger.handlers):
            if isinstance(h, logging.FileHandler):
                logger.removeHandler(h)
                h.close()


def test_print_summary_table(capsys):
    rows = [
        dict(mu0=4.3, mu1=0.021, n_steps=10, final_time=0.5, max_norm=1.5, front_position=None),
        dict(mu0=2.0, mu1=0.0, n_steps=10, final_time=0.5, max_norm=1.4, front_position=3.25),
    ]
    print_summary_table(rows)
    out = capsys.readouterr().out
    assert "mu0" in out
    assert "3.250" in out
