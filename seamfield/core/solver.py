"""
Direct sparse solve of the saddle-point system.

SuperLU with partial pivoting handles the symmetric indefinite KKT matrix.
Failures are terminal: no retry, no iterative fallback.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import splu

from .errors import FactorizationError, SolveError
from .logging_utils import resolve_logger
from .runtime_defaults import DEFAULTS, SolverOptions

_LOGGER = logging.getLogger(__name__)


def factorize_and_solve(
    matrix: sparse.spmatrix,
    rhs: np.ndarray,
    *,
    options: Optional[SolverOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> np.ndarray:
    """
    Solve A x = b with one LU factorization.

    Raises:
        FactorizationError: A is singular or structurally deficient
            (dependent constraints, unconstrained null space of the energy).
        SolveError: back-substitution produced a non-finite vector or a
            residual above `options.residual_tolerance`.
    """
    opts = options if options is not None else DEFAULTS
    log = resolve_logger(logger, _LOGGER)

    a = sparse.csc_matrix(matrix, dtype=np.float64)
    b = np.asarray(rhs, dtype=np.float64).reshape(-1)
    if a.shape[0] != a.shape[1] or a.shape[0] != b.shape[0]:
        raise FactorizationError(f"system is not square/consistent: A{a.shape}, b({b.shape[0]},)")

    log.debug("Factorizing system n=%d nnz=%d (permc_spec=%s)", a.shape[0], a.nnz, opts.permc_spec)
    t0 = time.perf_counter()
    try:
        lu = splu(
            a,
            permc_spec=opts.permc_spec,
            diag_pivot_thresh=opts.diag_pivot_thresh,
        )
    except (RuntimeError, ValueError) as e:
        raise FactorizationError(f"LU factorization failed: {e}") from e
    t1 = time.perf_counter()
    log.debug("Factorization done in %.3fs (nnz L=%d U=%d)", t1 - t0, lu.L.nnz, lu.U.nnz)

    try:
        x = np.asarray(lu.solve(b), dtype=np.float64).reshape(-1)
    except (RuntimeError, ValueError) as e:
        raise SolveError(f"back-substitution failed: {e}") from e

    if not np.isfinite(x).all():
        raise SolveError("solution contains NaN/Inf")

    b_norm = float(np.linalg.norm(b))
    residual = float(np.linalg.norm(a @ x - b))
    relative = residual / b_norm if b_norm > 0.0 else residual
    if not np.isfinite(relative) or relative > float(opts.residual_tolerance):
        raise SolveError(
            f"relative residual {relative:.3e} exceeds tolerance {opts.residual_tolerance:.1e}"
        )
    log.debug("Solve done in %.3fs (relative residual %.3e)", time.perf_counter() - t1, relative)
    return x
