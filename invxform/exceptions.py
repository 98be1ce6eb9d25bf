# -*- coding: utf-8 -*-
"""
INVXFORM Exception Hierarchy - Domain-specific exceptions for transform inversion.

Provides a small exception hierarchy that lets callers catch invxform errors
distinctly from Python built-in exceptions. All invxform exceptions subclass
both ``InvxformError`` and the appropriate built-in exception so existing
``except ValueError`` style handlers keep working.

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

# Standard library
from typing import Any, Optional


class InvxformError(Exception):
    """Base exception for all invxform errors."""


class ValidationError(InvxformError, ValueError):
    """Invalid input data, parameters, or configuration.

    Raised for coordinate vectors whose length does not match the
    transform dimensionality, malformed matrices or point sets, and
    out-of-range solver settings. Always raised before any numeric work.
    """


class NumericDegeneracyError(InvxformError, ArithmeticError):
    """Numerically degenerate state during inversion.

    Raised when a Jacobian or affine matrix is singular, or when a
    descent direction has zero, vanishing, or non-finite magnitude.
    """


class ConvergenceError(InvxformError, RuntimeError):
    """Iterative inversion ended without reaching the tolerance.

    Raised by ``InverseResult.raise_for_status()`` and by solvers
    configured with ``strict=True`` when the search stalls or exhausts
    its iteration budget. The best estimate is still available on
    ``result``.

    Parameters
    ----------
    message : str
        Human-readable description.
    result : InverseResult, optional
        The terminal solver result.
    """

    def __init__(self, message: str, result: Optional[Any] = None) -> None:
        super().__init__(message)
        self.result = result
