# -*- coding: utf-8 -*-
"""
INVXFORM - Iterative inversion of real coordinate transforms.

A modular Python library of coordinate-space transforms for image
registration: closed-form affine transforms, non-linear transforms
(thin-plate spline, B-spline, deformation field), and a numerical engine
that estimates the inverse of any forward transform one point at a time.

Dependencies
------------
numpy
scipy

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from invxform.exceptions import (
    InvxformError,
    ValidationError,
    NumericDegeneracyError,
    ConvergenceError,
)
from invxform.vocabulary import SolverStatus, JacobianKind
from invxform.transforms import (
    RealTransform,
    DifferentiableTransform,
    InvertibleTransform,
    InverseTransform,
    AffineTransform,
    ScaleAndTranslation,
    ThinPlateSplineTransform,
    BSplineTransform,
    DeformationFieldTransform,
)
from invxform.inverse import (
    SolverConfig,
    Jacobian,
    ExactJacobian,
    FiniteDifferenceJacobian,
    DisplacementFieldSource,
    BacktrackingLineSearch,
    InverseResult,
    IterativeInverseSolver,
    IterativeInvertibleTransform,
    InvertibleDeformationFieldTransform,
)

__all__ = [
    'InvxformError',
    'ValidationError',
    'NumericDegeneracyError',
    'ConvergenceError',
    'SolverStatus',
    'JacobianKind',
    'RealTransform',
    'DifferentiableTransform',
    'InvertibleTransform',
    'InverseTransform',
    'AffineTransform',
    'ScaleAndTranslation',
    'ThinPlateSplineTransform',
    'BSplineTransform',
    'DeformationFieldTransform',
    'SolverConfig',
    'Jacobian',
    'ExactJacobian',
    'FiniteDifferenceJacobian',
    'DisplacementFieldSource',
    'BacktrackingLineSearch',
    'InverseResult',
    'IterativeInverseSolver',
    'IterativeInvertibleTransform',
    'InvertibleDeformationFieldTransform',
]
