#!/usr/bin/env python
"""Plot the final fields of a run saved with store_fields=True.

Usage:
    python scripts/plot_case.py results/reference/reference.json [--out fig.pdf]
"""

import argparse
import json
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

sns.set_theme(style="whitegrid", context="paper", font_scale=1.1)


def load_fields(path):
    """Return (X, Y, U, V, result) reshaped to the (ny, nx) lattice."""
    with open(path) as f:
        result = json.load(f)
    if "fields" not in result:
        sys.exit(f"{path} has no fields; rerun with store_fields=True")
    m = result["mesh"]
    nx, ny = m["nx"], m["ny"]
    x = np.linspace(0.0, m["lx"], nx)
    y = np.linspace(0.0, m["ly"], ny)
    X, Y = np.meshgrid(x, y)
    U = np.asarray(result["fields"]["u"]).reshape(ny, nx)
    V = np.asarray(result["fields"]["v"]).reshape(ny, nx)
    return X, Y, U, V, result


def fig_fields(X, Y, U, V, result, out):
    fig, axes = plt.subplots(1, 3, figsize=(14, 4))
    for ax, F, label in zip(axes[:2], (U, V), ("u", "v")):
        cf = ax.contourf(X, Y, F, levels=40, cmap="viridis")
        fig.colorbar(cf, ax=ax)
        ax.set_title(label)
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_aspect("equal")

    # Profile along the middle row
    j = U.shape[0] // 2
    ax = axes[2]
    ax.plot(X[j], U[j], label="u")
    ax.plot(X[j], V[j], label="v")
    front = result.get("front_position")
    if front is not None:
        ax.axvline(front, color="k", ls="--", lw=0.8, label=f"front x={front:.2f}")
    ax.set_xlabel("x")
    ax.set_title(f"y = {Y[j, 0]:.1f}, t = {result['final_time']:.2f}")
    ax.legend()

    fig.tight_layout()
    fig.savefig(out, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved {out}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("path", type=Path)
    parser.add_argument("--out", type=Path, default=None)
    args = parser.parse_args()

    out = args.out or args.path.with_suffix(".pdf")
    X, Y, U, V, result = load_fields(args.path)
    fig_fields(X, Y, U, V, result, out)


if __name__ == "__main__":
    main()
