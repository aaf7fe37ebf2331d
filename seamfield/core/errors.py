"""
Error types raised by the parameterization solver.
"""

from __future__ import annotations


class ParameterizationError(RuntimeError):
    """Base class for every failure of a parameterization call."""


class InvalidInputError(ParameterizationError, ValueError):
    pass


class DimensionMismatchError(InvalidInputError):
    pass


class FactorizationError(ParameterizationError):
    pass


class SolveError(ParameterizationError):
    pass
