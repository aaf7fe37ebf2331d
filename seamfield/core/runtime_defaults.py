"""
Runtime defaults for the sparse solver.

Values can be overridden via environment variables so that applications can
tune the factorization without threading options through every call site.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os


ENV_PERMC_SPEC = "SEAMFIELD_PERMC_SPEC"
ENV_DIAG_PIVOT_THRESH = "SEAMFIELD_DIAG_PIVOT_THRESH"
ENV_RESIDUAL_TOLERANCE = "SEAMFIELD_RESIDUAL_TOLERANCE"
ENV_CONSTRAINT_TOLERANCE = "SEAMFIELD_CONSTRAINT_TOLERANCE"

PERMC_SPECS = ("NATURAL", "MMD_ATA", "MMD_AT_PLUS_A", "COLAMD")


@dataclass(frozen=True)
class SolverOptions:
    """
    Attributes:
        permc_spec: SuperLU column ordering.
        diag_pivot_thresh: SuperLU partial-pivoting threshold. 1.0 is full
            partial pivoting, which the indefinite saddle-point matrix needs.
        residual_tolerance: maximum relative residual ||Ax - b|| / ||b||
            accepted after back-substitution.
        constraint_tolerance: constraint violations above this are logged.
    """
    permc_spec: str = "COLAMD"
    diag_pivot_thresh: float = 1.0
    residual_tolerance: float = 1e-6
    constraint_tolerance: float = 1e-8


def _read_float_env(
    env_name: str,
    default: float,
    *,
    min_value: float | None = None,
    max_value: float | None = None,
    exclusive_min: bool = False,
) -> float:
    raw = os.environ.get(env_name)
    if raw is None:
        return default
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return default

    if not math.isfinite(value):
        return default
    if min_value is not None:
        if value < min_value or (exclusive_min and value == min_value):
            return default
    if max_value is not None and value > max_value:
        return default
    return value


def _read_choice_env(env_name: str, default: str, choices: tuple[str, ...]) -> str:
    raw = os.environ.get(env_name)
    if raw is None:
        return default
    value = str(raw).strip().upper()
    if value not in choices:
        return default
    return value


def load_solver_defaults() -> SolverOptions:
    base = SolverOptions()
    return SolverOptions(
        permc_spec=_read_choice_env(ENV_PERMC_SPEC, base.permc_spec, PERMC_SPECS),
        diag_pivot_thresh=_read_float_env(
            ENV_DIAG_PIVOT_THRESH,
            base.diag_pivot_thresh,
            min_value=0.0,
            max_value=1.0,
        ),
        residual_tolerance=_read_float_env(
            ENV_RESIDUAL_TOLERANCE,
            base.residual_tolerance,
            min_value=0.0,
            exclusive_min=True,
        ),
        constraint_tolerance=_read_float_env(
            ENV_CONSTRAINT_TOLERANCE,
            base.constraint_tolerance,
            min_value=0.0,
            exclusive_min=True,
        ),
    )


DEFAULTS = load_solver_defaults()
