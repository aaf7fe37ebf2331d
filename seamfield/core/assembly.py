"""
Saddle-point system assembly.

Energy: 0.5 * || M^(1/2) (D P x - gamma) ||^2 subject to C x = c.
Stationarity gives the KKT system

    [ E   C^T ] [ x      ]   [ P^T D^T M gamma ]
    [ C   0   ] [ lambda ] = [ c               ]

with E = P^T D^T M D P.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import sparse

from .errors import DimensionMismatchError


@dataclass
class SaddleSystem:
    """
    Augmented system A [x; lambda] = b.

    Attributes:
        matrix: (n_reduced + n_constraints) square symmetric CSC matrix
        rhs: right-hand side b
        n_reduced: size of the energy block
        n_constraints: number of Lagrange multipliers
    """
    matrix: sparse.csc_matrix
    rhs: np.ndarray
    n_reduced: int
    n_constraints: int

    @property
    def size(self) -> int:
        return self.n_reduced + self.n_constraints

    @property
    def nnz(self) -> int:
        return int(self.matrix.nnz)


def assemble_energy(
    d0: sparse.spmatrix,
    mass: sparse.spmatrix,
    corner_map: sparse.spmatrix,
) -> sparse.csr_matrix:
    """E = P^T D^T M D P in reduced-unknown space."""
    dp = (sparse.csr_matrix(d0) @ sparse.csr_matrix(corner_map)).tocsr()
    energy = (dp.T @ (mass @ dp)).tocsr()
    # round-off can break symmetry in the product order; A must be exactly symmetric
    energy = ((energy + energy.T) * 0.5).tocsr()
    energy.eliminate_zeros()
    return energy


def assemble_gradient_rhs(
    d0: sparse.spmatrix,
    mass: sparse.spmatrix,
    gamma: np.ndarray,
    corner_map: sparse.spmatrix,
) -> np.ndarray:
    """P^T D^T M gamma."""
    weighted = mass @ np.asarray(gamma, dtype=np.float64).reshape(-1)
    return np.asarray(corner_map.T @ (d0.T @ weighted), dtype=np.float64).reshape(-1)


def assemble_saddle_system(
    energy: sparse.spmatrix,
    gradient_rhs: np.ndarray,
    constraints: sparse.spmatrix,
    constraint_rhs: Optional[np.ndarray] = None,
) -> SaddleSystem:
    """
    Embed the energy and the constraints into one symmetric indefinite matrix.

    `constraint_rhs` fills the bottom segment of b. When it is None the
    constraints are homogeneous (C x = 0).
    """
    n_reduced = int(energy.shape[0])
    if energy.shape[1] != n_reduced:
        raise DimensionMismatchError(f"energy matrix is not square: {energy.shape}")
    gradient_rhs = np.asarray(gradient_rhs, dtype=np.float64).reshape(-1)
    if gradient_rhs.shape[0] != n_reduced:
        raise DimensionMismatchError(
            f"gradient rhs has {gradient_rhs.shape[0]} entries, expected {n_reduced}"
        )

    constraints = sparse.csr_matrix(constraints, dtype=np.float64)
    n_constraints = int(constraints.shape[0])
    if constraints.shape[1] != n_reduced:
        raise DimensionMismatchError(
            f"constraints have {constraints.shape[1]} columns, energy block is {n_reduced}"
        )

    if constraint_rhs is None:
        targets = np.zeros(n_constraints, dtype=np.float64)
    else:
        targets = np.asarray(constraint_rhs, dtype=np.float64).reshape(-1)
        if targets.shape[0] != n_constraints:
            raise DimensionMismatchError(
                f"constraint_rhs has {targets.shape[0]} entries, expected {n_constraints}"
            )

    # one-shot triplet assembly of [[E, C^T], [C, 0]]
    e = sparse.coo_matrix(energy)
    c = constraints.tocoo()
    rows = np.concatenate([e.row, c.row + n_reduced, c.col])
    cols = np.concatenate([e.col, c.col, c.row + n_reduced])
    vals = np.concatenate([e.data, c.data, c.data])

    size = n_reduced + n_constraints
    matrix = sparse.coo_matrix((vals, (rows, cols)), shape=(size, size)).tocsc()

    rhs = np.zeros(size, dtype=np.float64)
    rhs[:n_reduced] = gradient_rhs
    rhs[n_reduced:] = targets

    return SaddleSystem(matrix=matrix, rhs=rhs, n_reduced=n_reduced, n_constraints=n_constraints)
