# -*- coding: utf-8 -*-
"""
Deformation Field Transform - Dense displacement-vector-field transforms.

Provides ``DeformationFieldTransform``, which interprets an array of shape
``(*spatial, n)`` as an n-dimensional vector field: a source point is
displaced by adding the field vector sampled at its position.

The field is sampled continuously with n-linear interpolation via
``scipy.ndimage.map_coordinates``. Outside the sampled grid the field is
extended by zero, so points far from the grid map to themselves.

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
from typing import Any, Optional

# Third-party
import numpy as np
from scipy.ndimage import map_coordinates

# invxform internal
from invxform.exceptions import ValidationError
from invxform.transforms.base import RealTransform, as_coordinate


class DeformationFieldTransform(RealTransform):
    """n-dimensional deformation field ``F(x) = x + u(x)``.

    Parameters
    ----------
    field : np.ndarray
        Displacement vectors, shape ``(*spatial, n)`` where ``n`` equals
        the number of spatial axes. ``field[..., d]`` is the displacement
        along axis ``d`` in physical units.
    spacing : array-like, optional
        Physical distance between grid samples along each axis.
        Default is 1 on every axis.
    origin : array-like, optional
        Physical position of grid sample ``(0, ..., 0)``. Default zero.
    order : int
        Spline order of the field interpolation, 0 to 5. Default 1
        (n-linear).

    Raises
    ------
    ValidationError
        If the field shape, spacing, or origin are inconsistent.

    Examples
    --------
    >>> field = np.zeros((64, 64, 2))
    >>> field[..., 0] = 1.5            # shift every row coordinate by 1.5
    >>> xfm = DeformationFieldTransform(field)
    >>> xfm.apply([10.0, 20.0])
    array([11.5, 20. ])
    """

    def __init__(
        self,
        field: Any,
        spacing: Optional[Any] = None,
        origin: Optional[Any] = None,
        order: int = 1,
    ) -> None:
        field = np.asarray(field, dtype=np.float64)
        if field.ndim < 2:
            raise ValidationError(
                f"Deformation field must have shape (*spatial, n), "
                f"got {field.shape}"
            )
        ndim = field.ndim - 1
        if field.shape[-1] != ndim:
            raise ValidationError(
                f"Deformation field with {ndim} spatial axes must have "
                f"{ndim} components in its last axis, got {field.shape[-1]}"
            )
        if not 0 <= order <= 5:
            raise ValidationError(f"order must be in [0, 5], got {order}")

        if spacing is None:
            spacing = np.ones(ndim)
        spacing = as_coordinate(spacing, ndim, 'spacing')
        if np.any(spacing <= 0.0):
            raise ValidationError(
                f"spacing must be positive, got {spacing.tolist()}"
            )
        if origin is None:
            origin = np.zeros(ndim)

        self._field = field
        self._ndim = ndim
        self._spacing = spacing
        self._origin = as_coordinate(origin, ndim, 'origin')
        self._order = order

    @property
    def num_source_dimensions(self) -> int:
        return self._ndim

    @property
    def num_target_dimensions(self) -> int:
        return self._ndim

    @property
    def field(self) -> np.ndarray:
        """The displacement array, shape ``(*spatial, n)``."""
        return self._field

    @property
    def spacing(self) -> np.ndarray:
        return self._spacing.copy()

    @property
    def origin(self) -> np.ndarray:
        return self._origin.copy()

    @property
    def shape(self):
        """Spatial shape of the sampling grid."""
        return self._field.shape[:-1]

    def physical_to_index(self, x: np.ndarray) -> np.ndarray:
        """Continuous grid index of a physical coordinate."""
        return (x - self._origin) / self._spacing

    def displacement(self, x: Any) -> np.ndarray:
        """Displacement vector ``u(x)`` at a real coordinate.

        Parameters
        ----------
        x : array-like
            Physical coordinate of length ``n``.

        Returns
        -------
        np.ndarray
            Interpolated displacement, shape ``(n,)``. Zero-extended
            outside the grid.
        """
        x = as_coordinate(x, self._ndim, 'x')
        index = self.physical_to_index(x)[:, None]
        out = np.empty(self._ndim, dtype=np.float64)
        for d in range(self._ndim):
            out[d] = map_coordinates(
                self._field[..., d],
                index,
                order=self._order,
                mode='grid-constant',
                cval=0.0,
            )[0]
        return out

    def _apply(self, source: np.ndarray) -> np.ndarray:
        return source + self.displacement(source)
