"""
Input container for one parameterization solve.

Holds the mesh, the combed directional field, edge weights and the two linear
operators supplied by the cut/constraint stage, and checks that their
dimensions agree before anything is assembled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import sparse

from .errors import DimensionMismatchError, InvalidInputError


def _as_csr(value, name: str) -> sparse.csr_matrix:
    if value is None:
        raise InvalidInputError(f"{name} is None")
    if sparse.issparse(value):
        return sparse.csr_matrix(value, dtype=np.float64)
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim != 2:
        raise DimensionMismatchError(f"{name} must be a 2D matrix, got ndim={arr.ndim}")
    return sparse.csr_matrix(arr)


@dataclass
class ParameterizationInput:
    """
    Inputs of a single solve.

    Attributes:
        vertices: (#V, 3) vertex positions
        faces: (#F, 3) CCW-oriented vertex indices
        face_edges: (#F, 3) global edge id of local edge j (corner j -> j+1)
        raw_field: (#F, 3N) combed field, xyzxyz per face; N = width / 3
        edge_weights: (#E,) nonnegative weight per global edge
        corner_map: (3N*#F, n_reduced) sparse map from reduced unknowns to
            corner-branch values
        constraints: (n_constraints, n_reduced) sparse constraint rows
        constraint_rhs: (n_constraints,) constraint targets; zeros if None
    """
    vertices: np.ndarray
    faces: np.ndarray
    face_edges: np.ndarray
    raw_field: np.ndarray
    edge_weights: np.ndarray
    corner_map: sparse.csr_matrix
    constraints: sparse.csr_matrix
    constraint_rhs: Optional[np.ndarray] = None

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float64)
        self.faces = np.asarray(self.faces, dtype=np.int64)
        self.face_edges = np.asarray(self.face_edges, dtype=np.int64)
        self.raw_field = np.asarray(self.raw_field, dtype=np.float64)
        self.edge_weights = np.asarray(self.edge_weights, dtype=np.float64).reshape(-1)
        self.corner_map = _as_csr(self.corner_map, "corner_map")
        self.constraints = _as_csr(self.constraints, "constraints")
        if self.constraint_rhs is not None:
            self.constraint_rhs = np.asarray(self.constraint_rhs, dtype=np.float64).reshape(-1)

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0]) if self.vertices.ndim > 0 else 0

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0]) if self.faces.ndim > 0 else 0

    @property
    def n_edges(self) -> int:
        return len(self.edge_weights)

    @property
    def degree(self) -> int:
        """Number of field branches N."""
        if self.raw_field.ndim != 2:
            return 0
        return int(self.raw_field.shape[1]) // 3

    @property
    def n_corner_unknowns(self) -> int:
        return 3 * self.degree * self.n_faces

    @property
    def n_reduced(self) -> int:
        return int(self.corner_map.shape[1])

    @property
    def n_constraints(self) -> int:
        return int(self.constraints.shape[0])

    def targets(self) -> np.ndarray:
        """Constraint targets, homogeneous unless `constraint_rhs` was given."""
        if self.constraint_rhs is None:
            return np.zeros(self.n_constraints, dtype=np.float64)
        return self.constraint_rhs.copy()

    def validate(self) -> "ParameterizationInput":
        """Raise InvalidInputError / DimensionMismatchError on inconsistent inputs."""
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise DimensionMismatchError(f"vertices must be (#V, 3), got {self.vertices.shape}")
        if not np.isfinite(self.vertices).all():
            raise InvalidInputError("vertices contain NaN/Inf")

        if self.faces.ndim != 2 or self.faces.shape[1] != 3:
            raise DimensionMismatchError(f"faces must be (#F, 3), got {self.faces.shape}")
        if self.n_faces == 0:
            raise InvalidInputError("mesh has no faces")
        if self.faces.min() < 0 or self.faces.max() >= self.n_vertices:
            raise InvalidInputError("faces reference vertices out of range")

        if self.face_edges.shape != self.faces.shape:
            raise DimensionMismatchError(
                f"face_edges must match faces {self.faces.shape}, got {self.face_edges.shape}"
            )
        if self.edge_weights.size == 0:
            raise InvalidInputError("edge_weights is empty")
        if self.face_edges.min() < 0 or self.face_edges.max() >= self.n_edges:
            raise InvalidInputError(
                f"face_edges reference edges out of range (#E={self.n_edges})"
            )
        if not np.isfinite(self.edge_weights).all():
            raise InvalidInputError("edge_weights contain NaN/Inf")
        if np.any(self.edge_weights < 0.0):
            raise InvalidInputError("edge_weights must be nonnegative")

        if self.raw_field.ndim != 2 or self.raw_field.shape[0] != self.n_faces:
            raise DimensionMismatchError(
                f"raw_field must be (#F, 3N) with #F={self.n_faces}, got {self.raw_field.shape}"
            )
        width = int(self.raw_field.shape[1])
        if width == 0 or width % 3 != 0:
            raise DimensionMismatchError(f"raw_field width {width} is not a positive multiple of 3")
        if not np.isfinite(self.raw_field).all():
            raise InvalidInputError("raw_field contains NaN/Inf")

        if self.corner_map.shape[0] != self.n_corner_unknowns:
            raise DimensionMismatchError(
                f"corner_map has {self.corner_map.shape[0]} rows, expected 3*N*#F={self.n_corner_unknowns}"
            )
        if self.n_reduced == 0:
            raise DimensionMismatchError("corner_map has no columns")
        if self.constraints.shape[1] != self.n_reduced:
            raise DimensionMismatchError(
                f"constraints have {self.constraints.shape[1]} columns, "
                f"corner_map has {self.n_reduced}"
            )
        if not np.isfinite(self.corner_map.data).all() or not np.isfinite(self.constraints.data).all():
            raise InvalidInputError("corner_map/constraints contain NaN/Inf")

        if self.constraint_rhs is not None:
            if self.constraint_rhs.shape[0] != self.n_constraints:
                raise DimensionMismatchError(
                    f"constraint_rhs has {self.constraint_rhs.shape[0]} entries, "
                    f"expected {self.n_constraints}"
                )
            if not np.isfinite(self.constraint_rhs).all():
                raise InvalidInputError("constraint_rhs contains NaN/Inf")
        return self
