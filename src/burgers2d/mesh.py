# Copyright (c) 2026 Shmuel Link
# SPDX-License-Identifier: MIT

import numpy as np

from burgers2d.models.burgers import TAG_XMAX, TAG_XMIN, TAG_YMAX, TAG_YMIN


class RectMesh2d:
    """Uniform rectangular mesh with a vertex-centred dual.

    Vertices sit on an ``nx`` x ``ny`` lattice covering [0, lx] x [0, ly],
    numbered k = j*nx + i. Each vertex owns the rectangle of half-spacings
    around it, clipped at the domain boundary, so dual cells are half cells
    on edges and quarter cells at corners.

    Attributes:
        verts: vertex positions, shape (n_verts, 2)
        vols: dual cell areas, shape (n_verts,)
        edges: interior dual faces as vertex pairs (i, j), shape (n_edges, 2)
        normals: unit normals pointing from i to j, shape (n_edges, 2)
        lengths: dual face lengths, shape (n_edges,)
        h: distance between the two vertices of each edge, shape (n_edges,)
        bdy_verts: vertex owning each boundary face, shape (n_bdy,)
        bdy_tags: boundary tag of each face, shape (n_bdy,)
        bdy_normals: unit outward normals, shape (n_bdy, 2)
        bdy_lengths: boundary face lengths, shape (n_bdy,)
    """

    def __init__(self, lx, nx, ly, ny):
        if nx < 2 or ny < 2:
            raise ValueError(f"nx and ny must be >= 2, got nx={nx}, ny={ny}")
        if lx <= 0 or ly <= 0:
            raise ValueError(f"lx and ly must be positive, got lx={lx}, ly={ly}")

        self.lx = lx
        self.ly = ly
        self.nx = nx
        self.ny = ny
        self.dx = lx / (nx - 1)
        self.dy = ly / (ny - 1)

        x = np.linspace(0.0, lx, nx)
        y = np.linspace(0.0, ly, ny)
        X, Y = np.meshgrid(x, y)
        self.verts = np.column_stack([X.ravel(), Y.ravel()])

        # Dual widths: half spacing on the first and last lattice line
        wx = np.full(nx, self.dx)
        wx[[0, -1]] *= 0.5
        wy = np.full(ny, self.dy)
        wy[[0, -1]] *= 0.5
        self.vols = np.outer(wy, wx).ravel()

        idx = np.arange(nx * ny).reshape(ny, nx)

        # Edges along x: face normal (1, 0), face length is the dual width in y
        ex = np.column_stack([idx[:, :-1].ravel(), idx[:, 1:].ravel()])
        lx_faces = np.repeat(wy, nx - 1)
        # Edges along y: face normal (0, 1), face length is the dual width in x
        ey = np.column_stack([idx[:-1, :].ravel(), idx[1:, :].ravel()])
        ly_faces = np.tile(wx, ny - 1)

        self.edges = np.concatenate([ex, ey])
        self.normals = np.concatenate([
            np.tile([1.0, 0.0], (len(ex), 1)),
            np.tile([0.0, 1.0], (len(ey), 1)),
        ])
        self.lengths = np.concatenate([lx_faces, ly_faces])
        self.h = np.concatenate([np.full(len(ex), self.dx), np.full(len(ey), self.dy)])

        sides = [
            (idx[0, :], TAG_YMIN, (0.0, -1.0), wx),
            (idx[:, -1], TAG_XMAX, (1.0, 0.0), wy),
            (idx[-1, :], TAG_YMAX, (0.0, 1.0), wx),
            (idx[:, 0], TAG_XMIN, (-1.0, 0.0), wy),
        ]
        self.bdy_verts = np.concatenate([s[0] for s in sides])
        self.bdy_tags = np.concatenate([np.full(len(s[0]), s[1]) for s in sides])
        self.bdy_normals = np.concatenate([np.tile(s[2], (len(s[0]), 1)) for s in sides])
        self.bdy_lengths = np.concatenate([s[3] for s in sides])

    def n_verts(self):
        return self.nx * self.ny

    def n_edges(self):
        return len(self.edges)

    def vert(self, i):
        return self.verts[i]

    def interior_verts(self):
        """Indices of vertices that own no boundary face."""
        mask = np.ones(self.n_verts(), dtype=bool)
        mask[self.bdy_verts] = False
        return np.flatnonzero(mask)

    def row(self, j):
        """Vertex indices of lattice row j (constant y)."""
        return np.arange(j * self.nx, (j + 1) * self.nx)
