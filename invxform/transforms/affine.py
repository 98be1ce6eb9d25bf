# -*- coding: utf-8 -*-
"""
Affine Transforms - Closed-form invertible linear transforms.

Provides ``AffineTransform``, a general n-dimensional affine map stored as
an n x (n+1) augmented matrix ``[A | t]``, and ``ScaleAndTranslation``, a
faster axis-aligned special case (per-axis scale followed by a shift).
Both supply an exact Jacobian and an analytic inverse, so they never need
the iterative inversion engine; they are also the reference transforms
used to verify it.

Dependencies
------------
numpy

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

# invxform internal
from invxform.exceptions import NumericDegeneracyError, ValidationError
from invxform.transforms.base import (
    DifferentiableTransform,
    InvertibleTransform,
    as_coordinate,
)

if TYPE_CHECKING:
    from invxform.inverse.jacobian import Jacobian


def _augmented_matrix(matrix: Any) -> np.ndarray:
    """Validate and copy an affine matrix into n x (n+1) form.

    Accepts the augmented ``(n, n+1)`` form or the homogeneous
    ``(n+1, n+1)`` form whose last row is ``[0, ..., 0, 1]``.
    """
    mat = np.array(matrix, dtype=np.float64)
    if mat.ndim != 2:
        raise ValidationError(
            f"Affine matrix must be 2D, got shape {mat.shape}"
        )
    rows, cols = mat.shape
    if cols == rows + 1 and rows >= 1:
        return mat
    if rows == cols and rows >= 2:
        last = np.zeros(cols)
        last[-1] = 1.0
        if not np.allclose(mat[-1], last):
            raise ValidationError(
                "Homogeneous affine matrix must have last row "
                f"[0, ..., 0, 1], got {mat[-1].tolist()}"
            )
        return mat[:-1].copy()
    raise ValidationError(
        f"Affine matrix must be (n, n+1) or (n+1, n+1), got {mat.shape}"
    )


class AffineTransform(InvertibleTransform, DifferentiableTransform):
    """n-dimensional affine transform ``y = A x + t``.

    Parameters
    ----------
    matrix : array-like
        Augmented matrix ``[A | t]`` of shape ``(n, n+1)``, or the
        homogeneous ``(n+1, n+1)`` form.

    Raises
    ------
    ValidationError
        If the matrix shape is not an affine shape.

    Examples
    --------
    >>> rot = AffineTransform([[0.0, 1.0, 0.0, 0.1],
    ...                        [-1.0, 0.0, 0.0, 8.0],
    ...                        [0.0, 0.0, 1.0, 50.0]])
    >>> rot.apply([3.0, 0.5, 30.0])
    array([ 0.6,  5. , 80. ])
    """

    def __init__(self, matrix: Any) -> None:
        self._matrix = _augmented_matrix(matrix)
        self._ndim = self._matrix.shape[0]

    @classmethod
    def identity(cls, ndim: int) -> 'AffineTransform':
        """Identity transform in ``ndim`` dimensions."""
        if ndim < 1:
            raise ValidationError(f"ndim must be >= 1, got {ndim}")
        return cls(np.hstack([np.eye(ndim), np.zeros((ndim, 1))]))

    @property
    def num_source_dimensions(self) -> int:
        return self._ndim

    @property
    def num_target_dimensions(self) -> int:
        return self._ndim

    @property
    def matrix(self) -> np.ndarray:
        """Copy of the augmented ``(n, n+1)`` matrix."""
        return self._matrix.copy()

    @property
    def linear(self) -> np.ndarray:
        """Copy of the ``(n, n)`` linear part ``A``."""
        return self._matrix[:, :-1].copy()

    @property
    def translation(self) -> np.ndarray:
        """Copy of the translation column ``t``."""
        return self._matrix[:, -1].copy()

    def get(self, row: int, col: int) -> float:
        """Element of the augmented matrix."""
        return float(self._matrix[row, col])

    def set(self, row: int, col: int, value: float) -> None:
        """Set an element of the augmented matrix.

        Do not call on a transform that is shared with a running
        inversion.
        """
        self._matrix[row, col] = value

    def row_packed(self) -> np.ndarray:
        """Augmented matrix flattened in row-major order."""
        return self._matrix.ravel().copy()

    def homogeneous(self) -> np.ndarray:
        """The ``(n+1, n+1)`` homogeneous form of the matrix."""
        full = np.eye(self._ndim + 1, dtype=np.float64)
        full[:-1, :] = self._matrix
        return full

    def _apply(self, source: np.ndarray) -> np.ndarray:
        return self._matrix[:, :-1] @ source + self._matrix[:, -1]

    def jacobian(self, x: Any) -> 'Jacobian':
        """Exact Jacobian: the linear part, independent of ``x``.

        The translation column of the returned Jacobian is zero since the
        derivative of an affine map does not depend on position.
        """
        from invxform.inverse.jacobian import Jacobian

        point = as_coordinate(x, self._ndim, 'x')
        return Jacobian(self._matrix[:, :-1], point=point)

    def _inverse_matrix(self) -> np.ndarray:
        try:
            inv = np.linalg.inv(self.homogeneous())
        except np.linalg.LinAlgError as exc:
            raise NumericDegeneracyError(
                "Affine matrix is singular and cannot be inverted"
            ) from exc
        if not np.all(np.isfinite(inv)):
            raise NumericDegeneracyError(
                "Affine matrix inverse is not finite"
            )
        return inv[:-1, :]

    def inverse(self) -> 'AffineTransform':
        """Analytic inverse ``x = A^-1 (y - t)``.

        Raises
        ------
        NumericDegeneracyError
            If ``A`` is singular.
        """
        return AffineTransform(self._inverse_matrix())

    def apply_inverse(self, target: Any) -> np.ndarray:
        y = as_coordinate(target, self._ndim, 'target')
        try:
            return np.linalg.solve(
                self._matrix[:, :-1], y - self._matrix[:, -1]
            )
        except np.linalg.LinAlgError as exc:
            raise NumericDegeneracyError(
                "Affine matrix is singular and cannot be inverted"
            ) from exc

    def __repr__(self) -> str:
        rows = ', '.join(
            '[' + ', '.join(f"{v:g}" for v in row) + ']'
            for row in self._matrix
        )
        return f"{type(self).__name__}([{rows}])"


class ScaleAndTranslation(InvertibleTransform, DifferentiableTransform):
    """Per-axis scaling followed by a shift: ``y_i = s_i * x_i + t_i``.

    Faster than an equivalent ``AffineTransform`` and with an inverse
    computed once at construction.

    Parameters
    ----------
    scales : array-like
        Per-axis scale factors, shape ``(n,)``. Must all be non-zero.
    translations : array-like
        Per-axis shifts, shape ``(n,)``.

    Raises
    ------
    ValidationError
        If the vectors differ in length or any scale is zero.
    """

    def __init__(self, scales: Any, translations: Any) -> None:
        scales = as_coordinate(scales, name='scales')
        translations = as_coordinate(
            translations, scales.shape[0], 'translations'
        )
        if np.any(scales == 0.0):
            raise ValidationError(
                f"Scales must be non-zero, got {scales.tolist()}"
            )
        self._scales = scales
        self._translations = translations
        self._inverse = self._create_inverse()

    def _create_inverse(self) -> 'ScaleAndTranslation':
        inv = ScaleAndTranslation.__new__(ScaleAndTranslation)
        inv._scales = 1.0 / self._scales
        inv._translations = -self._translations * inv._scales
        inv._inverse = self
        return inv

    @property
    def num_source_dimensions(self) -> int:
        return self._scales.shape[0]

    @property
    def num_target_dimensions(self) -> int:
        return self._scales.shape[0]

    @property
    def scales(self) -> np.ndarray:
        return self._scales.copy()

    @property
    def translations(self) -> np.ndarray:
        return self._translations.copy()

    def get(self, row: int, col: int) -> float:
        """Element of the equivalent augmented ``(n, n+1)`` matrix."""
        n = self._scales.shape[0]
        if col == row:
            return float(self._scales[row])
        if col == n:
            return float(self._translations[row])
        return 0.0

    def row_packed(self) -> np.ndarray:
        """Equivalent augmented matrix flattened in row-major order."""
        return self.to_affine().row_packed()

    def to_affine(self) -> AffineTransform:
        """Equivalent general ``AffineTransform``."""
        return AffineTransform(
            np.hstack([np.diag(self._scales), self._translations[:, None]])
        )

    def _apply(self, source: np.ndarray) -> np.ndarray:
        return self._scales * source + self._translations

    def jacobian(self, x: Any) -> 'Jacobian':
        from invxform.inverse.jacobian import Jacobian

        point = as_coordinate(x, self.num_source_dimensions, 'x')
        return Jacobian(np.diag(self._scales), point=point)

    def apply_inverse(self, target: Any) -> np.ndarray:
        return self._inverse.apply(target)

    def inverse(self) -> 'ScaleAndTranslation':
        return self._inverse

    def __repr__(self) -> str:
        return (
            f"ScaleAndTranslation(scales={self._scales.tolist()}, "
            f"translations={self._translations.tolist()})"
        )
