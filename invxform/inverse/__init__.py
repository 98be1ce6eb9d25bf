# -*- coding: utf-8 -*-
"""
Inverse Module - Iterative single-point inversion of forward transforms.

Estimates ``x`` with ``F(x) ~= y`` for transforms that have no closed-form
inverse, by gradient descent with a backtracking Armijo line search.

Key Classes
-----------
- SolverConfig: Tolerance, iteration cap and line-search settings
- Jacobian: Local derivative as an augmented affine matrix
- ExactJacobian / FiniteDifferenceJacobian / DisplacementFieldSource:
  Direction sources for the solver
- BacktrackingLineSearch: Armijo step-size selection
- IterativeInverseSolver: The inversion loop
- InverseResult: Terminal status and best estimate of one solve
- IterativeInvertibleTransform: Forward transform plus iterative inverse
- InvertibleDeformationFieldTransform: Deformation field inverse

Usage
-----
    >>> from invxform.inverse import IterativeInvertibleTransform, SolverConfig
    >>> inv = IterativeInvertibleTransform(tps, config=SolverConfig(tolerance=5e-5))
    >>> result = inv.solve(y)
    >>> result.status, result.estimate

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

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

from invxform.inverse.config import SolverConfig
from invxform.inverse.direction import (
    DirectionEstimate,
    direction_toward,
    displacement_direction,
    normalize_direction,
)
from invxform.inverse.jacobian import (
    Jacobian,
    JacobianSource,
    ExactJacobian,
    FiniteDifferenceJacobian,
    DisplacementFieldSource,
)
from invxform.inverse.line_search import (
    BacktrackingLineSearch,
    LineSearchResult,
    squared_error,
)
from invxform.inverse.solver import InverseResult, IterativeInverseSolver
from invxform.inverse.adapter import (
    DEFORMATION_FIELD_CONFIG,
    IterativeInvertibleTransform,
    InvertibleDeformationFieldTransform,
    default_jacobian_source,
)

__all__ = [
    'SolverConfig',
    'DirectionEstimate',
    'direction_toward',
    'displacement_direction',
    'normalize_direction',
    'Jacobian',
    'JacobianSource',
    'ExactJacobian',
    'FiniteDifferenceJacobian',
    'DisplacementFieldSource',
    'BacktrackingLineSearch',
    'LineSearchResult',
    'squared_error',
    'InverseResult',
    'IterativeInverseSolver',
    'DEFORMATION_FIELD_CONFIG',
    'IterativeInvertibleTransform',
    'InvertibleDeformationFieldTransform',
    'default_jacobian_source',
]
