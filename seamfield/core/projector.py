"""
Map the reduced solution back to per-corner values.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy import sparse

from .errors import DimensionMismatchError


def split_solution(solution: np.ndarray, n_reduced: int) -> Tuple[np.ndarray, np.ndarray]:
    """Separate the reduced unknowns from the trailing Lagrange multipliers."""
    solution = np.asarray(solution, dtype=np.float64).reshape(-1)
    n = int(n_reduced)
    if n < 0 or n > solution.shape[0]:
        raise DimensionMismatchError(
            f"reduced dimension {n} does not fit a solution of size {solution.shape[0]}"
        )
    return solution[:n].copy(), solution[n:].copy()


def project_to_corners(corner_map: sparse.spmatrix, reduced: np.ndarray) -> np.ndarray:
    """corner UV = P x, laid out as (face, corner, branch)."""
    reduced = np.asarray(reduced, dtype=np.float64).reshape(-1)
    if corner_map.shape[1] != reduced.shape[0]:
        raise DimensionMismatchError(
            f"corner_map has {corner_map.shape[1]} columns, got {reduced.shape[0]} unknowns"
        )
    return np.asarray(corner_map @ reduced, dtype=np.float64).reshape(-1)


def corner_uv_per_face(corner_uv: np.ndarray, n_faces: int, degree: int) -> np.ndarray:
    """(3N*#F,) -> (#F, 3, N); entry [i, j, k] is branch k at corner j of face i."""
    corner_uv = np.asarray(corner_uv, dtype=np.float64).reshape(-1)
    expected = 3 * int(degree) * int(n_faces)
    if corner_uv.shape[0] != expected:
        raise DimensionMismatchError(f"corner UV has {corner_uv.shape[0]} values, expected {expected}")
    return corner_uv.reshape(int(n_faces), 3, int(degree))
