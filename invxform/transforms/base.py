# -*- coding: utf-8 -*-
"""
Transform Base Classes - Abstract interfaces for real coordinate transforms.

Defines abstract base classes for forward mappings between real-valued
coordinate spaces. Concrete implementations handle different transform
families (affine, thin-plate spline, B-spline, deformation field).

Coordinate Conventions
----------------------
- A coordinate is a 1D ``np.ndarray`` of float64 with one entry per axis.
- Axis order follows array axis order, e.g. ``(row, col)`` in 2D and
  ``(plane, row, col)`` in 3D.
- ``apply`` never mutates its input and always returns a new array.

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
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple, TYPE_CHECKING

# Third-party
import numpy as np

# invxform internal
from invxform.exceptions import ValidationError

if TYPE_CHECKING:
    from invxform.inverse.jacobian import Jacobian


def as_coordinate(
    value: Any,
    ndim: Optional[int] = None,
    name: str = 'coordinate',
) -> np.ndarray:
    """Convert a scalar, list, or array to a 1D float64 coordinate vector.

    Parameters
    ----------
    value : float, list, or np.ndarray
        Coordinate values. Scalars are treated as 1D coordinates.
    ndim : int, optional
        Required length. When given, a mismatched length raises.
    name : str
        Name used in error messages.

    Returns
    -------
    np.ndarray
        New 1D float64 array; never a view of ``value``.

    Raises
    ------
    ValidationError
        If ``value`` is not one-dimensional or its length differs from
        ``ndim``.
    """
    arr = np.array(value, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise ValidationError(
            f"{name} must be a 1D vector, got shape {arr.shape}"
        )
    if ndim is not None and arr.shape[0] != ndim:
        raise ValidationError(
            f"{name} has {arr.shape[0]} components, expected {ndim}"
        )
    return arr


class RealTransform(ABC):
    """Abstract base class for forward coordinate transforms.

    A transform maps a point in an ``n_source``-dimensional space to a
    point in an ``n_target``-dimensional space. Subclasses implement
    ``_apply`` on a validated float64 vector; the public ``apply``
    handles conversion and dimension checks.

    Implementations must be safe to call concurrently: no per-call
    scratch buffers may be stored on the instance.
    """

    @property
    @abstractmethod
    def num_source_dimensions(self) -> int:
        """Dimensionality of the source space."""
        ...

    @property
    @abstractmethod
    def num_target_dimensions(self) -> int:
        """Dimensionality of the target space."""
        ...

    def dimensions(self) -> Tuple[int, int]:
        """Source and target dimensionality.

        Returns
        -------
        Tuple[int, int]
            ``(n_source, n_target)``.
        """
        return self.num_source_dimensions, self.num_target_dimensions

    @abstractmethod
    def _apply(self, source: np.ndarray) -> np.ndarray:
        """Transform a validated source vector.

        Parameters
        ----------
        source : np.ndarray
            Source coordinate, shape ``(n_source,)``, float64.

        Returns
        -------
        np.ndarray
            Target coordinate, shape ``(n_target,)``.
        """
        ...

    def apply(self, source: Any) -> np.ndarray:
        """Transform a source point into the target space.

        Parameters
        ----------
        source : array-like
            Source coordinate of length ``n_source``.

        Returns
        -------
        np.ndarray
            Target coordinate, shape ``(n_target,)``.

        Raises
        ------
        ValidationError
            If ``source`` has the wrong length.
        """
        x = as_coordinate(source, self.num_source_dimensions, 'source')
        return self._apply(x)

    def __call__(self, source: Any) -> np.ndarray:
        return self.apply(source)

    def __repr__(self) -> str:
        n_src, n_tgt = self.dimensions()
        return f"{type(self).__name__}({n_src}D -> {n_tgt}D)"


class DifferentiableTransform(RealTransform):
    """Transform that can compute its exact derivative.

    Differentiable transforms can have their inverse estimated with an
    exact Jacobian, see ``invxform.inverse.ExactJacobian``.
    """

    @abstractmethod
    def jacobian(self, x: Any) -> 'Jacobian':
        """Jacobian matrix of this transform at ``x``.

        Parameters
        ----------
        x : array-like
            Point at which to evaluate the derivative.

        Returns
        -------
        Jacobian
            Linear part in the first ``n`` columns, zero translation
            column.
        """
        ...


class InvertibleTransform(RealTransform):
    """Transform that also maps target points back to source points."""

    @abstractmethod
    def apply_inverse(self, target: Any) -> np.ndarray:
        """Map a target point back into the source space.

        Parameters
        ----------
        target : array-like
            Target coordinate of length ``n_target``.

        Returns
        -------
        np.ndarray
            Source coordinate, shape ``(n_source,)``.
        """
        ...

    def inverse(self) -> 'InvertibleTransform':
        """Inverse view of this transform.

        Returns
        -------
        InvertibleTransform
            Transform whose ``apply`` is this transform's
            ``apply_inverse`` and vice versa.
        """
        return InverseTransform(self)


class InverseTransform(InvertibleTransform):
    """Inverse view of an ``InvertibleTransform``.

    Swaps the roles of ``apply`` and ``apply_inverse``. Nothing is
    solved or copied at construction; every call is delegated to the
    wrapped transform.

    Parameters
    ----------
    transform : InvertibleTransform
        Transform to view backwards.
    """

    def __init__(self, transform: InvertibleTransform) -> None:
        if not isinstance(transform, InvertibleTransform):
            raise TypeError(
                f"InverseTransform requires an InvertibleTransform, "
                f"got {type(transform).__name__}"
            )
        self._transform = transform

    @property
    def num_source_dimensions(self) -> int:
        return self._transform.num_target_dimensions

    @property
    def num_target_dimensions(self) -> int:
        return self._transform.num_source_dimensions

    def _apply(self, source: np.ndarray) -> np.ndarray:
        return self._transform.apply_inverse(source)

    def apply_inverse(self, target: Any) -> np.ndarray:
        return self._transform.apply(target)

    def inverse(self) -> InvertibleTransform:
        """Return the wrapped transform."""
        return self._transform

    def __repr__(self) -> str:
        return f"InverseTransform({self._transform!r})"
