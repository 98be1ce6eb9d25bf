# -*- coding: utf-8 -*-
"""
Transforms Module - Forward coordinate transforms.

Provides the transform interfaces and the concrete forward transforms used
in image registration. Affine-family transforms have closed-form inverses;
the non-linear transforms are inverted numerically with
``invxform.inverse``.

Key Classes
-----------
- RealTransform: Abstract base class for forward transforms
- DifferentiableTransform: Transforms with an exact Jacobian
- InvertibleTransform: Transforms with an inverse mapping
- InverseTransform: Inverse view of an invertible transform
- AffineTransform: General n-dimensional affine map
- ScaleAndTranslation: Per-axis scale and shift
- ThinPlateSplineTransform: Landmark thin-plate spline
- BSplineTransform: B-spline free-form deformation
- DeformationFieldTransform: Dense displacement-vector field

Dependencies
------------
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

from invxform.transforms.base import (
    RealTransform,
    DifferentiableTransform,
    InvertibleTransform,
    InverseTransform,
    as_coordinate,
)
from invxform.transforms.affine import AffineTransform, ScaleAndTranslation
from invxform.transforms.thin_plate import ThinPlateSplineTransform
from invxform.transforms.bspline import BSplineKernel, BSplineTransform
from invxform.transforms.deformation import DeformationFieldTransform

__all__ = [
    'RealTransform',
    'DifferentiableTransform',
    'InvertibleTransform',
    'InverseTransform',
    'as_coordinate',
    'AffineTransform',
    'ScaleAndTranslation',
    'ThinPlateSplineTransform',
    'BSplineKernel',
    'BSplineTransform',
    'DeformationFieldTransform',
]
