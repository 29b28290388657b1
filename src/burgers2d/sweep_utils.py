# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

"""Shared utilities for sweep scripts: save/load results, logging, summary tables."""

import csv
import logging
import os

from burgers2d.io import save_run, write_manifest

FLOAT_COLUMNS = ("mu0", "mu1", "final_time", "max_norm", "front_position")


def save_sweep_results(results, outdir):
    """Save per-case JSON files, step manifests and a summary CSV.

    Args:
        results: list of result dicts from run_case.
        outdir: output directory path.

    Returns:
        list of summary row dicts.
    """
    os.makedirs(outdir, exist_ok=True)
    summary_rows = []

    for r in results:
        p = r["params"]
        stem = f"mu0_{p['mu0']}_mu1_{p['mu1']}"
        save_run(r, os.path.join(outdir, f"{stem}.json"))
        steps = [{"time": s["time"], "dt": s["dt"], "max_norm": s["max_norm"]}
                 for s in r["steps"]]
        write_manifest(r["names"], steps, os.path.join(outdir, f"{stem}_steps.json"))

        summary_rows.append({
            "mu0": p["mu0"],
            "mu1": p["mu1"],
            "n_steps": r["n_steps"],
            "final_time": r["final_time"],
            "max_norm": r["max_norm"],
            "front_position": r.get("front_position"),
        })

    # Write summary CSV
    if summary_rows:
        csv_path = os.path.join(outdir, "summary.csv")
        with open(csv_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=summary_rows[0].keys())
            writer.writeheader()
            writer.writerows(summary_rows)

    return summary_rows


def load_sweep_summary(csv_path):
    """Read a summary CSV into a list of dicts with proper types.

    Float columns are converted to float (empty front_position -> None),
    n_steps to int.
    """
    rows = []
    with open(csv_path, "r") as f:
        reader = csv.DictReader(f)
        for row in reader:
            typed = {}
            for k, v in row.items():
                if k in FLOAT_COLUMNS:
                    typed[k] = float(v) if v != "" else None
                elif k == "n_steps":
                    typed[k] = int(v)
                else:
                    typed[k] = v
            rows.append(typed)
    return rows


def configure_logging(outdir, run_name):
    """Set up file + console logging on the 'burgers2d' logger.

    Args:
        outdir: directory for the log file.
        run_name: used in the log filename.

    Returns:
        the configured logger.
    """
    os.makedirs(outdir, exist_ok=True)
    logger = logging.getLogger("burgers2d")
    logger.setLevel(logging.INFO)

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    # File handler
    log_path = os.path.join(outdir, f"{run_name}.log")
    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.INFO)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    # Console handler (only if none already exists)
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    return logger


def print_summary_table(summary_rows):
    """Print a formatted summary table to stdout."""
    header = f"{'mu0':>8} {'mu1':>8} {'steps':>7} {'t_final':>9} {'max|x|':>10} {'front':>9}"
    print(header)
    print("-" * len(header))
    for row in summary_rows:
        front = row["front_position"]
        front = f"{front:>9.3f}" if front is not None else f"{'-':>9}"
        print(
            f"{row['mu0']:>8.4f} {row['mu1']:>8.4f} {row['n_steps']:>7d} "
            f"{row['final_time']:>9.3f} {row['max_norm']:>10.4f} {front}"
        )
