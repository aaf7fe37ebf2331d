"""
Face-based discrete differential.

For every face i, local corner j and field branch k the row
r = 3N*i + N*j + k holds the directed difference "corner (j+1)%3 minus
corner j" of branch k, and gamma[r] is the projection of field branch k onto
the same triangle edge. A scalar function whose corner differences match
gamma has the field as its gradient.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy import sparse


def corner_branch_index(face, corner, branch, degree: int):
    """
    Flat index of (face, corner, branch) in corner-branch space.

    The corner is wrapped modulo 3 before it is scaled by the branch stride,
    so `corner_branch_index(i, j + 1, k, N)` always stays inside face i.
    Works on scalars and on broadcastable integer arrays.
    """
    n = int(degree)
    return 3 * n * np.asarray(face) + n * (np.asarray(corner) % 3) + np.asarray(branch)


def _corner_grid(n_faces: int, degree: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    # (face, corner, branch) in row order
    faces_idx, corners, branches = np.meshgrid(
        np.arange(n_faces, dtype=np.int64),
        np.arange(3, dtype=np.int64),
        np.arange(degree, dtype=np.int64),
        indexing="ij",
    )
    return faces_idx.reshape(-1), corners.reshape(-1), branches.reshape(-1)


def build_face_differential(
    vertices: np.ndarray,
    faces: np.ndarray,
    raw_field: np.ndarray,
) -> Tuple[sparse.csr_matrix, np.ndarray]:
    """
    Build the corner difference operator d0 and the target differences gamma.

    Args:
        vertices: (#V, 3) vertex positions
        faces: (#F, 3) vertex indices
        raw_field: (#F, 3N) combed field in xyzxyz layout

    Returns:
        d0: (3N*#F, 3N*#F) sparse operator with -1 / +1 per row
        gamma: (3N*#F,) field projected onto each directed face edge
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    faces = np.asarray(faces, dtype=np.int64)
    raw_field = np.asarray(raw_field, dtype=np.float64)

    n_faces = int(faces.shape[0])
    degree = int(raw_field.shape[1]) // 3
    size = 3 * degree * n_faces

    fi, cj, bk = _corner_grid(n_faces, degree)
    rows = corner_branch_index(fi, cj, bk, degree)
    next_cols = corner_branch_index(fi, cj + 1, bk, degree)

    d0 = sparse.coo_matrix(
        (
            np.concatenate([-np.ones(size), np.ones(size)]),
            (np.concatenate([rows, rows]), np.concatenate([rows, next_cols])),
        ),
        shape=(size, size),
    ).tocsr()

    # (#F, 3, 3): edge vector from corner j to corner j+1
    tri = vertices[faces]
    edge_vectors = np.roll(tri, -1, axis=1) - tri
    field = raw_field.reshape(n_faces, degree, 3)
    gamma = np.einsum("ijx,ikx->ijk", edge_vectors, field).reshape(-1)

    return d0, gamma
