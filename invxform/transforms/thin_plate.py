# -*- coding: utf-8 -*-
"""
Thin-Plate Spline Transform - Landmark-based smooth non-linear transform.

Provides ``ThinPlateSplineTransform``, which maps a set of source landmarks
exactly onto target landmarks and interpolates smoothly in between. The
mapping is the sum of an affine term and radial basis functions
``U(r) = r^2 log r`` centred on the source landmarks:

    F(x) = a_0 + A x + sum_i w_i U(|x - p_i|)

The coefficients are found by solving the bordered linear system

    [ K   P ] [ w ]   [ Q ]
    [ P^T 0 ] [ a ] = [ 0 ]

with ``K_ij = U(|p_i - p_j|)`` and ``P = [1 | p]``. The same kernel is used
in every dimension. The transform has no closed-form inverse; wrap it in
``invxform.inverse.IterativeInvertibleTransform`` to invert it.

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

# Standard library
from typing import Any, TYPE_CHECKING

# Third-party
import numpy as np
from scipy import linalg
from scipy.spatial.distance import cdist

# invxform internal
from invxform.exceptions import NumericDegeneracyError, ValidationError
from invxform.transforms.base import DifferentiableTransform, as_coordinate

if TYPE_CHECKING:
    from invxform.inverse.jacobian import Jacobian


def tps_kernel(r: np.ndarray) -> np.ndarray:
    """Thin-plate radial basis ``U(r) = r^2 log r`` with ``U(0) = 0``."""
    r = np.asarray(r, dtype=np.float64)
    out = np.zeros_like(r)
    nz = r > 0.0
    out[nz] = r[nz] ** 2 * np.log(r[nz])
    return out


class ThinPlateSplineTransform(DifferentiableTransform):
    """Thin-plate spline through paired landmarks.

    Parameters
    ----------
    source_points : np.ndarray
        Source landmarks, shape ``(N, n)``.
    target_points : np.ndarray
        Target landmarks, shape ``(N, n)``. ``F(source_points[i]) ==
        target_points[i]``.

    Raises
    ------
    ValidationError
        If the point arrays differ in shape or there are fewer than
        ``n + 1`` landmarks.
    NumericDegeneracyError
        If the landmarks are degenerate (duplicated or all on a
        hyperplane) and the system cannot be solved.

    Examples
    --------
    >>> src = np.array([[-1, 0], [0, -1], [1, 0], [0, 1]], dtype=float)
    >>> tps = ThinPlateSplineTransform(src, 2 * src)
    >>> tps.apply([0.5, 0.5])
    array([1., 1.])
    """

    def __init__(self, source_points: Any, target_points: Any) -> None:
        src = np.array(source_points, dtype=np.float64)
        tgt = np.array(target_points, dtype=np.float64)
        if src.ndim != 2:
            raise ValidationError(
                f"source_points must be (N, n), got shape {src.shape}"
            )
        if src.shape != tgt.shape:
            raise ValidationError(
                f"Landmark arrays must have the same shape. "
                f"Source: {src.shape}, Target: {tgt.shape}"
            )
        n_points, ndim = src.shape
        if n_points < ndim + 1:
            raise ValidationError(
                f"A {ndim}D thin-plate spline requires at least {ndim + 1} "
                f"landmarks, got {n_points}"
            )

        self._source_points = src
        self._target_points = tgt
        self._ndim = ndim
        self._weights, self._affine = self._fit(src, tgt)

    @staticmethod
    def _fit(src: np.ndarray, tgt: np.ndarray):
        n_points, ndim = src.shape
        size = n_points + ndim + 1

        system = np.zeros((size, size), dtype=np.float64)
        system[:n_points, :n_points] = tps_kernel(cdist(src, src))
        poly = np.hstack([np.ones((n_points, 1)), src])
        system[:n_points, n_points:] = poly
        system[n_points:, :n_points] = poly.T

        rhs = np.zeros((size, ndim), dtype=np.float64)
        rhs[:n_points] = tgt

        try:
            coeffs = linalg.solve(system, rhs, assume_a='sym')
        except linalg.LinAlgError as exc:
            raise NumericDegeneracyError(
                "Thin-plate spline landmarks are degenerate"
            ) from exc
        if not np.all(np.isfinite(coeffs)):
            raise NumericDegeneracyError(
                "Thin-plate spline coefficients are not finite"
            )
        # weights (N, n), affine (n+1, n) with the constant term in row 0
        return coeffs[:n_points], coeffs[n_points:]

    @property
    def num_source_dimensions(self) -> int:
        return self._ndim

    @property
    def num_target_dimensions(self) -> int:
        return self._ndim

    @property
    def source_points(self) -> np.ndarray:
        return self._source_points.copy()

    @property
    def target_points(self) -> np.ndarray:
        return self._target_points.copy()

    @property
    def num_landmarks(self) -> int:
        return self._source_points.shape[0]

    def _apply(self, source: np.ndarray) -> np.ndarray:
        r = np.linalg.norm(self._source_points - source, axis=1)
        return (
            tps_kernel(r) @ self._weights
            + self._affine[0]
            + source @ self._affine[1:]
        )

    def jacobian(self, x: Any) -> 'Jacobian':
        """Exact Jacobian of the spline at ``x``.

        Uses ``dU/dx = (2 log r + 1) (x - p)``, which vanishes at the
        landmarks themselves.
        """
        from invxform.inverse.jacobian import Jacobian

        x = as_coordinate(x, self._ndim, 'x')
        diff = x - self._source_points
        r = np.linalg.norm(diff, axis=1)
        gain = np.zeros_like(r)
        nz = r > 0.0
        gain[nz] = 2.0 * np.log(r[nz]) + 1.0
        linear = self._weights.T @ (gain[:, None] * diff) + self._affine[1:].T
        return Jacobian(linear, point=x)

    def __repr__(self) -> str:
        return (
            f"ThinPlateSplineTransform({self._ndim}D, "
            f"landmarks={self.num_landmarks})"
        )
