"""
Diagonal edge-weight (mass) matrix for the corner differences.
"""

from __future__ import annotations

import numpy as np
from scipy import sparse


def build_edge_mass(face_edges: np.ndarray, edge_weights: np.ndarray, degree: int) -> sparse.csr_matrix:
    """
    Diagonal matrix over the rows of the face differential.

    The entry for row (i, j, k) is the weight of global edge face_edges[i, j];
    all N branches of a face edge share it. A zero weight drops that edge
    difference from the energy.
    """
    face_edges = np.asarray(face_edges, dtype=np.int64)
    edge_weights = np.asarray(edge_weights, dtype=np.float64).reshape(-1)
    n = int(degree)

    per_corner = edge_weights[face_edges]  # (#F, 3)
    diagonal = np.repeat(per_corner.reshape(-1), n)
    return sparse.diags(diagonal, 0, shape=(diagonal.size, diagonal.size), format="csr")
