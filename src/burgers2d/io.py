# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

import json
import numpy as np


class _NumpyEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


def save_run(result, path):
    with open(path, "w") as f:
        json.dump(result, f, cls=_NumpyEncoder, indent=2)


def load_run(path):
    with open(path, "r") as f:
        return json.load(f)


def write_manifest(names, steps, path):
    """Write the boundary names and the per-step index of a run.

    ``names`` maps boundary name to tag, ``steps`` is a list of dicts with
    at least a ``time`` entry.
    """
    config = {"names": names, "steps": steps}
    with open(path, "w") as f:
        json.dump(config, f, cls=_NumpyEncoder, indent=4)
