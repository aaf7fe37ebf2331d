"""
Core solver modules for SeamField
"""

from .errors import (
    ParameterizationError,
    InvalidInputError,
    DimensionMismatchError,
    FactorizationError,
    SolveError,
)
from .field_data import ParameterizationInput
from .differential import build_face_differential, corner_branch_index
from .mass import build_edge_mass
from .assembly import SaddleSystem, assemble_energy, assemble_gradient_rhs, assemble_saddle_system
from .solver import factorize_and_solve
from .projector import corner_uv_per_face, project_to_corners, split_solution
from .parameterize import ParameterizationResult, parameterize, solve_corner_uv
from .runtime_defaults import SolverOptions, load_solver_defaults
from .maps import corner_map_from_indices, identity_corner_map, pin_constraints, vertex_corner_map

__all__ = [
    # Errors
    'ParameterizationError',
    'InvalidInputError',
    'DimensionMismatchError',
    'FactorizationError',
    'SolveError',
    # Inputs
    'ParameterizationInput',
    # Operators
    'build_face_differential',
    'corner_branch_index',
    'build_edge_mass',
    # Assembly
    'SaddleSystem',
    'assemble_energy',
    'assemble_gradient_rhs',
    'assemble_saddle_system',
    # Solve
    'factorize_and_solve',
    'SolverOptions',
    'load_solver_defaults',
    # Projection
    'split_solution',
    'project_to_corners',
    'corner_uv_per_face',
    # Entry points
    'ParameterizationResult',
    'parameterize',
    'solve_corner_uv',
    # Corner maps / constraints
    'identity_corner_map',
    'corner_map_from_indices',
    'vertex_corner_map',
    'pin_constraints',
]
