"""
Face-edge topology helpers.

The solver only needs, for each face, the global id of each local edge. This
module derives it with trimesh for callers that do not already have an
edge-topology stage.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

try:
    import trimesh
except ImportError:
    raise ImportError("trimesh is required. Install with: pip install trimesh")


def _as_trimesh(vertices: np.ndarray, faces: np.ndarray) -> "trimesh.Trimesh":
    # process=False keeps vertex and face order untouched
    return trimesh.Trimesh(
        vertices=np.asarray(vertices, dtype=np.float64),
        faces=np.asarray(faces, dtype=np.int64),
        process=False,
    )


def face_edge_map(vertices: np.ndarray, faces: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Global edge id of every local face edge.

    Returns:
        face_edges: (#F, 3); column j is the edge from corner j to corner j+1
        n_edges: number of unique edges
    """
    mesh = _as_trimesh(vertices, faces)
    face_edges = np.asarray(mesh.faces_unique_edges, dtype=np.int64).reshape(-1, 3)
    return face_edges, int(len(mesh.edges_unique))


def edge_lengths(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Length of each unique edge, indexed like `face_edge_map`."""
    mesh = _as_trimesh(vertices, faces)
    return np.asarray(mesh.edges_unique_length, dtype=np.float64)


def uniform_edge_weights(n_edges: int, value: float = 1.0) -> np.ndarray:
    return np.full(int(n_edges), float(value), dtype=np.float64)
