# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

"""Command-line interface for burgers2d runs and mu sweeps."""

import argparse
import os

from burgers2d.sweep import build_sweep_grid, run_case, run_sweep
from burgers2d.sweep_utils import configure_logging, save_sweep_results, print_summary_table


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="burgers2d-run",
        description="Run the 2D vector Burgers test case over (mu0, mu1).",
    )
    parser.add_argument(
        "--mu0", nargs="+", type=float, default=[4.3],
        help="Inflow value(s) on the xmax boundary (default: 4.3)",
    )
    parser.add_argument(
        "--mu1", nargs="+", type=float, default=[0.021],
        help="Source growth rate(s) (default: 0.021)",
    )
    parser.add_argument(
        "--lx", type=float, default=100.0,
        help="Domain length in x (default: 100.0)",
    )
    parser.add_argument(
        "--ly", type=float, default=100.0,
        help="Domain length in y (default: 100.0)",
    )
    parser.add_argument(
        "--nx", type=int, default=250,
        help="Vertices in x (default: 250)",
    )
    parser.add_argument(
        "--ny", type=int, default=250,
        help="Vertices in y (default: 250)",
    )
    parser.add_argument(
        "--tf", type=float, default=25.0,
        help="Final time (default: 25.0)",
    )
    step = parser.add_mutually_exclusive_group()
    step.add_argument(
        "--n-steps", type=int, default=None,
        help="Fixed time step tf/n_steps (default: 500 when --cfl is not given)",
    )
    step.add_argument(
        "--cfl", type=float, default=None,
        help="CFL number for the adaptive time step",
    )
    parser.add_argument(
        "--temporal", type=str, default="explicit",
        choices=["explicit", "implicit"],
        help="Temporal discretization (default: explicit)",
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Max parallel cases (default: cpu count)",
    )
    parser.add_argument(
        "--outdir", type=str, default="results",
        help="Output directory (default: results/)",
    )

    args = parser.parse_args(argv)
    n_steps = args.n_steps
    if n_steps is None and args.cfl is None:
        n_steps = 500

    configure_logging(args.outdir, "burgers2d")

    param_list = build_sweep_grid(
        mu0_vals=args.mu0,
        mu1_vals=args.mu1,
        lx=args.lx,
        ly=args.ly,
        nx=args.nx,
        ny=args.ny,
        tf=args.tf,
        n_steps=n_steps,
        cfl=args.cfl,
    )
    for params in param_list:
        params["temporal"] = args.temporal

    n_cases = len(param_list)
    print(f"Running {n_cases} cases (mu0={args.mu0}, mu1={args.mu1})")
    print(f"Mesh: {args.nx}x{args.ny} on {args.lx}x{args.ly}, tf={args.tf}")
    if args.cfl is not None:
        print(f"Time step: adaptive, cfl={args.cfl}")
    else:
        print(f"Time step: fixed, {n_steps} steps")
    print()

    if n_cases == 1:
        results = [run_case(param_list[0])]
    else:
        results = run_sweep(param_list, max_workers=args.workers)

    summary_rows = save_sweep_results(results, args.outdir)
    print_summary_table(summary_rows)
    print(f"\nResults saved to {args.outdir}/")
    print(f"Summary: {os.path.join(args.outdir, 'summary.csv')}")


if __name__ == "__main__":
    main()
