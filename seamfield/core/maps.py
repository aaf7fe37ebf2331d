"""
Builders for the corner-to-reduced map P and simple pin constraints.

These cover the common cases (no cuts, every corner independent, pinned
values). Cut-aware maps and period constraints come from the cut-graph stage.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from scipy import sparse

from .errors import DimensionMismatchError, InvalidInputError


def identity_corner_map(n_faces: int, degree: int) -> sparse.csr_matrix:
    """Every corner-branch value is its own unknown."""
    size = 3 * int(degree) * int(n_faces)
    return sparse.identity(size, dtype=np.float64, format="csr")


def corner_map_from_indices(reduced_index: np.ndarray, n_reduced: int) -> sparse.csr_matrix:
    """
    Selection matrix from a per-corner-branch reduced index.

    Args:
        reduced_index: (3N*#F,) or (#F, 3, N) reduced unknown of each
            corner-branch; -1 leaves that row empty.
        n_reduced: number of reduced unknowns (columns)
    """
    idx = np.asarray(reduced_index, dtype=np.int64).reshape(-1)
    n_cols = int(n_reduced)
    if np.any(idx >= n_cols) or np.any(idx < -1):
        raise InvalidInputError(f"reduced indices must lie in [-1, {n_cols})")

    rows = np.nonzero(idx >= 0)[0]
    cols = idx[rows]
    return sparse.coo_matrix(
        (np.ones(rows.size, dtype=np.float64), (rows, cols)),
        shape=(idx.size, n_cols),
    ).tocsr()


def vertex_corner_map(faces: np.ndarray, n_vertices: int, degree: int) -> sparse.csr_matrix:
    """
    Identify all corners that share a vertex (a mesh without cuts).

    Branch k of vertex v is reduced unknown v*N + k.
    """
    faces = np.asarray(faces, dtype=np.int64)
    n = int(degree)
    reduced = faces[:, :, None] * n + np.arange(n, dtype=np.int64)[None, None, :]
    return corner_map_from_indices(reduced, int(n_vertices) * n)


def pin_constraints(
    indices: Sequence[int] | np.ndarray,
    values: Sequence[float] | np.ndarray | float,
    n_reduced: int,
) -> Tuple[sparse.csr_matrix, np.ndarray]:
    """
    One constraint row per pinned reduced unknown: x[indices[r]] = values[r].

    Returns the constraint matrix and its target vector.
    """
    idx = np.asarray(indices, dtype=np.int64).reshape(-1)
    try:
        targets = np.broadcast_to(np.asarray(values, dtype=np.float64), idx.shape).astype(np.float64)
    except ValueError as e:
        raise DimensionMismatchError(f"values do not match {idx.size} pinned indices") from e
    n_cols = int(n_reduced)
    if np.any(idx < 0) or np.any(idx >= n_cols):
        raise InvalidInputError(f"pinned indices must lie in [0, {n_cols})")

    matrix = sparse.coo_matrix(
        (np.ones(idx.size, dtype=np.float64), (np.arange(idx.size), idx)),
        shape=(idx.size, n_cols),
    ).tocsr()
    return matrix, targets
