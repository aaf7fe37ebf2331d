"""
Constrained seamless parameterization from a combed directional field.

Pipeline: field + weights -> face differential / gamma -> reduced energy ->
saddle-point system -> LU solve -> per-corner values. Nothing is cached
between calls and the inputs are never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .assembly import assemble_energy, assemble_gradient_rhs, assemble_saddle_system
from .differential import build_face_differential
from .errors import (
    FactorizationError,
    InvalidInputError,
    ParameterizationError,
    SolveError,
)
from .field_data import ParameterizationInput
from .logging_utils import log_once, resolve_logger
from .mass import build_edge_mass
from .projector import corner_uv_per_face, project_to_corners, split_solution
from .runtime_defaults import DEFAULTS, SolverOptions
from .solver import factorize_and_solve

_LOGGER = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_INVALID_INPUT = "invalid_input"
STATUS_FACTORIZATION_FAILED = "factorization_failed"
STATUS_SOLVE_FAILED = "solve_failed"


@dataclass
class ParameterizationResult:
    """
    Outcome of `parameterize`.

    Attributes:
        success: True when corner_uv holds a solution
        status: one of the STATUS_* values
        corner_uv: (3N*#F,) corner values, None on failure
        message: failure description (empty on success)
        degree: field branch count N (0 if it could not be inferred)
        n_faces: face count
        meta: solve diagnostics (sizes, energy, constraint violation, timing)
    """
    success: bool
    status: str
    corner_uv: Optional[np.ndarray] = None
    message: str = ""
    degree: int = 0
    n_faces: int = 0
    meta: Dict[str, Any] = field(default_factory=dict)

    def per_face(self) -> np.ndarray:
        """Corner values as (#F, 3, N)."""
        if self.corner_uv is None:
            raise ValueError(f"no solution available (status={self.status})")
        return corner_uv_per_face(self.corner_uv, self.n_faces, self.degree)


def _run(
    data: ParameterizationInput,
    opts: SolverOptions,
    log: logging.Logger,
) -> Tuple[np.ndarray, Dict[str, Any]]:
    t0 = time.perf_counter()
    data.validate()
    degree = data.degree

    n_zero = int(np.count_nonzero(data.edge_weights[np.unique(data.face_edges)] == 0.0))
    if n_zero > 0:
        log_once(
            log,
            "parameterize:zero_edge_weights",
            logging.INFO,
            "%d edges have zero weight and do not contribute to the energy",
            n_zero,
        )

    d0, gamma = build_face_differential(data.vertices, data.faces, data.raw_field)
    mass = build_edge_mass(data.face_edges, data.edge_weights, degree)
    energy = assemble_energy(d0, mass, data.corner_map)
    gradient = assemble_gradient_rhs(d0, mass, gamma, data.corner_map)
    system = assemble_saddle_system(energy, gradient, data.constraints, data.targets())
    log.debug(
        "Assembled saddle system: N=%d faces=%d reduced=%d constraints=%d nnz=%d",
        degree,
        data.n_faces,
        system.n_reduced,
        system.n_constraints,
        system.nnz,
    )

    solution = factorize_and_solve(system.matrix, system.rhs, options=opts, logger=log)
    reduced, _multipliers = split_solution(solution, system.n_reduced)
    corner_uv = project_to_corners(data.corner_map, reduced)

    residual = d0 @ corner_uv - gamma
    energy_value = float(residual @ (mass @ residual))
    if system.n_constraints > 0:
        violation = float(np.max(np.abs(data.constraints @ reduced - data.targets())))
    else:
        violation = 0.0
    if violation > float(opts.constraint_tolerance):
        log.warning(
            "Constraint violation %.3e exceeds tolerance %.1e",
            violation,
            opts.constraint_tolerance,
        )

    meta: Dict[str, Any] = {
        "degree": degree,
        "n_faces": data.n_faces,
        "n_reduced": system.n_reduced,
        "n_constraints": system.n_constraints,
        "system_nnz": system.nnz,
        "energy": energy_value,
        "max_constraint_violation": violation,
        "elapsed_sec": time.perf_counter() - t0,
    }
    return corner_uv, meta


def solve_corner_uv(
    vertices: np.ndarray,
    faces: np.ndarray,
    face_edges: np.ndarray,
    raw_field: np.ndarray,
    edge_weights: np.ndarray,
    corner_map,
    constraints,
    *,
    constraint_rhs: Optional[np.ndarray] = None,
    options: Optional[SolverOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> np.ndarray:
    """
    Corner values whose face differences best match the field.

    Minimizes sum_e w_e (u_{j+1} - u_j - <field_k, e>)^2 over all face edges
    and branches, with u = P x and C x = constraint_rhs (0 if None).

    Args:
        vertices: (#V, 3) vertex positions
        faces: (#F, 3) CCW vertex indices
        face_edges: (#F, 3) global edge of local edge j (corner j -> j+1)
        raw_field: (#F, 3N) combed field, CCW-ordered, xyzxyz layout
        edge_weights: (#E,) nonnegative weights
        corner_map: P, sparse (3N*#F, n_reduced)
        constraints: C, sparse (n_constraints, n_reduced)
        constraint_rhs: optional constraint targets
        options: solver options (defaults from the environment)
        logger: logger for diagnostics (module logger if None)

    Returns:
        (3N*#F,) corner values laid out as (face, corner, branch)

    Raises:
        InvalidInputError / DimensionMismatchError: before any assembly
        FactorizationError, SolveError: from the sparse solve
    """
    data = ParameterizationInput(
        vertices=vertices,
        faces=faces,
        face_edges=face_edges,
        raw_field=raw_field,
        edge_weights=edge_weights,
        corner_map=corner_map,
        constraints=constraints,
        constraint_rhs=constraint_rhs,
    )
    opts = options if options is not None else DEFAULTS
    corner_uv, _meta = _run(data, opts, resolve_logger(logger, _LOGGER))
    return corner_uv


def parameterize(
    vertices: np.ndarray,
    faces: np.ndarray,
    face_edges: np.ndarray,
    raw_field: np.ndarray,
    edge_weights: np.ndarray,
    corner_map,
    constraints,
    *,
    constraint_rhs: Optional[np.ndarray] = None,
    options: Optional[SolverOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> ParameterizationResult:
    """
    Same as `solve_corner_uv`, but failures come back as a result value.

    The caller decides whether to adjust weights or constraints and retry.
    """
    log = resolve_logger(logger, _LOGGER)
    opts = options if options is not None else DEFAULTS

    try:
        data = ParameterizationInput(
            vertices=vertices,
            faces=faces,
            face_edges=face_edges,
            raw_field=raw_field,
            edge_weights=edge_weights,
            corner_map=corner_map,
            constraints=constraints,
            constraint_rhs=constraint_rhs,
        )
    except (InvalidInputError, ValueError, TypeError) as e:
        log.warning("Parameterization rejected input: %s", e)
        return ParameterizationResult(success=False, status=STATUS_INVALID_INPUT, message=str(e))

    degree = 0
    n_faces = 0
    try:
        degree = data.degree
        n_faces = data.n_faces
        corner_uv, meta = _run(data, opts, log)
    except InvalidInputError as e:
        status, err = STATUS_INVALID_INPUT, e
    except FactorizationError as e:
        status, err = STATUS_FACTORIZATION_FAILED, e
    except SolveError as e:
        status, err = STATUS_SOLVE_FAILED, e
    except ParameterizationError as e:
        status, err = STATUS_SOLVE_FAILED, e
    else:
        return ParameterizationResult(
            success=True,
            status=STATUS_OK,
            corner_uv=corner_uv,
            degree=degree,
            n_faces=n_faces,
            meta=meta,
        )

    log.warning("Parameterization failed (%s): %s", status, err)
    return ParameterizationResult(
        success=False,
        status=status,
        message=str(err),
        degree=degree,
        n_faces=n_faces,
    )
