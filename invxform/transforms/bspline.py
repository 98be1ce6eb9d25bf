# -*- coding: utf-8 -*-
"""
B-Spline Transform - Free-form deformation on a regular control grid.

Provides ``BSplineKernel`` (the order 0-3 B-spline basis functions) and
``BSplineTransform``, which displaces a point by the B-spline-weighted sum
of displacement coefficients in the local support window around it:

    F(x) = x + sum_k  w_k(x) c_k

Points whose support window extends outside the coefficient grid are
returned unchanged (identity fallback). This matches how the transform is
used for image registration, where the grid covers the region of
interest and points outside it are not deformed.

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
import logging
from typing import Any, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# invxform internal
from invxform.exceptions import ValidationError
from invxform.transforms.base import RealTransform, as_coordinate

logger = logging.getLogger(__name__)


class BSplineKernel:
    """Centred B-spline basis function of order 0 to 3.

    Parameters
    ----------
    order : int
        Spline order. Default 3 (cubic).

    Raises
    ------
    ValidationError
        If ``order`` is not 0, 1, 2, or 3.
    """

    SUPPORTED_ORDERS = (0, 1, 2, 3)

    def __init__(self, order: int = 3) -> None:
        if order not in self.SUPPORTED_ORDERS:
            raise ValidationError(
                f"B-spline order must be one of {self.SUPPORTED_ORDERS}, "
                f"got {order}"
            )
        self.order = order

    @property
    def support_radius(self) -> float:
        return (self.order + 1.0) / 2.0

    @property
    def support_width(self) -> int:
        return self.order + 1

    def evaluate(self, u: Union[float, np.ndarray]) -> np.ndarray:
        """Kernel value at offset ``u`` (scalar or array)."""
        a = np.abs(np.asarray(u, dtype=np.float64))
        if self.order == 0:
            return np.where(a < 0.5, 1.0, np.where(a == 0.5, 0.5, 0.0))
        if self.order == 1:
            return np.where(a < 1.0, 1.0 - a, 0.0)
        if self.order == 2:
            return np.where(
                a < 0.5, 0.75 - a * a,
                np.where(a < 1.5, (9.0 - 12.0 * a + 4.0 * a * a) / 8.0, 0.0),
            )
        sq = a * a
        return np.where(
            a < 1.0, (4.0 - 6.0 * sq + 3.0 * sq * a) / 6.0,
            np.where(a < 2.0, (8.0 - 12.0 * a + 6.0 * sq - sq * a) / 6.0, 0.0),
        )

    def __repr__(self) -> str:
        return f"BSplineKernel(order={self.order})"


def _stack_coefficients(
    coefficients: Union[np.ndarray, Sequence[np.ndarray]],
) -> np.ndarray:
    if isinstance(coefficients, np.ndarray):
        coefs = coefficients.astype(np.float64, copy=False)
    else:
        coefs = np.stack(
            [np.asarray(c, dtype=np.float64) for c in coefficients], axis=-1
        )
    ndim = coefs.ndim - 1
    if ndim < 1 or coefs.shape[-1] != ndim:
        raise ValidationError(
            f"Coefficients must have shape (*grid, n) with n grid axes, "
            f"got {coefs.shape}"
        )
    return coefs


class BSplineTransform(RealTransform):
    """B-spline free-form deformation.

    Parameters
    ----------
    coefficients : np.ndarray or sequence of np.ndarray
        Displacement coefficients on the control grid, either one array of
        shape ``(*grid, n)`` or a sequence of ``n`` arrays of shape
        ``grid`` (one per displacement component).
    grid_spacing : array-like
        Physical spacing of the control grid, shape ``(n,)``.
    grid_offset : array-like
        Physical position of control point ``(0, ..., 0)``, shape ``(n,)``.
    order : int
        B-spline order, 0 to 3. Default 3.

    Raises
    ------
    ValidationError
        If the coefficient shape or grid geometry is inconsistent.
    """

    def __init__(
        self,
        coefficients: Union[np.ndarray, Sequence[np.ndarray]],
        grid_spacing: Any,
        grid_offset: Any,
        order: int = 3,
    ) -> None:
        self._coefficients = _stack_coefficients(coefficients)
        self._ndim = self._coefficients.ndim - 1
        self._grid_spacing = as_coordinate(
            grid_spacing, self._ndim, 'grid_spacing'
        )
        if np.any(self._grid_spacing <= 0.0):
            raise ValidationError(
                f"grid_spacing must be positive, "
                f"got {self._grid_spacing.tolist()}"
            )
        self._grid_offset = as_coordinate(
            grid_offset, self._ndim, 'grid_offset'
        )
        self._kernel = BSplineKernel(order)
        self._grid_max = np.array(self._coefficients.shape[:-1]) - 1

    @property
    def num_source_dimensions(self) -> int:
        return self._ndim

    @property
    def num_target_dimensions(self) -> int:
        return self._ndim

    @property
    def kernel(self) -> BSplineKernel:
        return self._kernel

    @property
    def order(self) -> int:
        return self._kernel.order

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients

    def to_grid_index(self, x: np.ndarray) -> np.ndarray:
        """Continuous control-grid index of a physical point."""
        return (x - self._grid_offset) / self._grid_spacing

    def kernel_support(self, grid_index: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """First and last control index of the support window.

        Parameters
        ----------
        grid_index : np.ndarray
            Continuous control-grid index, shape ``(n,)``.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray]
            ``(start, end)`` integer arrays, both inclusive.
        """
        start = np.ceil(grid_index - self._kernel.support_radius).astype(int)
        end = start + self._kernel.support_width - 1
        return start, end

    def is_support_valid(self, start: np.ndarray, end: np.ndarray) -> bool:
        """Whether a support window lies inside the coefficient grid."""
        return bool(np.all(start >= 0) and np.all(end <= self._grid_max))

    def weights(self, relative: np.ndarray) -> np.ndarray:
        """Tensor-product kernel weights over the support window.

        Parameters
        ----------
        relative : np.ndarray
            Grid index relative to the window start, shape ``(n,)``.

        Returns
        -------
        np.ndarray
            Weights, shape ``(support_width,) * n``.
        """
        taps = np.arange(self._kernel.support_width, dtype=np.float64)
        out: Optional[np.ndarray] = None
        for d in range(self._ndim):
            w = self._kernel.evaluate(relative[d] - taps)
            out = w if out is None else np.multiply.outer(out, w)
        return out

    def displacement(self, x: Any) -> np.ndarray:
        """Displacement at ``x``; zero where the support is invalid."""
        x = as_coordinate(x, self._ndim, 'x')
        index = self.to_grid_index(x)
        start, end = self.kernel_support(index)
        if not self.is_support_valid(start, end):
            logger.debug(
                "B-spline support %s..%s outside coefficient grid; "
                "identity at %s", start.tolist(), end.tolist(), x.tolist(),
            )
            return np.zeros(self._ndim)

        window = tuple(slice(s, e + 1) for s, e in zip(start, end))
        weights = self.weights(index - start)
        coefs = self._coefficients[window]
        return np.tensordot(weights, coefs, axes=self._ndim)

    def _apply(self, source: np.ndarray) -> np.ndarray:
        return source + self.displacement(source)

    def __repr__(self) -> str:
        grid = tuple(self._coefficients.shape[:-1])
        return f"BSplineTransform({self._ndim}D, grid={grid}, order={self.order})"
