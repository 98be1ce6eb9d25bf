# -*- coding: utf-8 -*-
"""
Direction Estimation - Unit descent directions for iterative inversion.

Given the residual ``err = y - F(x)`` between a target point and the
current image of an estimate, these functions produce the unit-length
direction in which to move ``x`` so that ``F(x + t d)`` approaches ``y``.

Two variants are provided:

- ``direction_toward`` solves ``J d = err`` with the local Jacobian
  (a Newton direction) and reports the directional-derivative slope used
  by the Armijo test.
- ``displacement_direction`` uses the negated displacement vector of a
  deformation field at the estimate, with no Jacobian involved.

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
from typing import Optional, TYPE_CHECKING

# Third-party
import numpy as np

# invxform internal
from invxform.exceptions import NumericDegeneracyError, ValidationError

if TYPE_CHECKING:
    from invxform.inverse.jacobian import Jacobian

# Smallest direction norm that is still normalised.
_MIN_NORM = np.finfo(np.float64).tiny


class DirectionEstimate:
    """A unit descent direction and its expected decrease rate.

    Parameters
    ----------
    direction : np.ndarray
        Unit-length direction, shape ``(n,)``.
    slope : float or None
        Directional derivative of the squared error along
        ``-direction``, i.e. the decrease per unit step predicted by the
        linearisation. ``None`` when no Jacobian was involved.
    """

    __slots__ = ('direction', 'slope')

    def __init__(
        self,
        direction: np.ndarray,
        slope: Optional[float] = None,
    ) -> None:
        self.direction = direction
        self.slope = slope

    def __repr__(self) -> str:
        return (
            f"DirectionEstimate(direction={self.direction.tolist()}, "
            f"slope={self.slope})"
        )


def normalize_direction(
    vector: np.ndarray,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Scale a vector to unit length.

    Parameters
    ----------
    vector : np.ndarray
        Vector to normalise, shape ``(n,)``.
    out : np.ndarray, optional
        Buffer of shape ``(n,)`` to write into. A new array is allocated
        when omitted.

    Returns
    -------
    np.ndarray
        The unit vector (``out`` when given).

    Raises
    ------
    NumericDegeneracyError
        If the vector has zero, sub-normal, or non-finite magnitude.
    """
    norm = float(np.linalg.norm(vector))
    if not np.isfinite(norm):
        raise NumericDegeneracyError(
            f"Descent direction is not finite: {np.asarray(vector).tolist()}"
        )
    if norm < _MIN_NORM:
        raise NumericDegeneracyError(
            "Descent direction has zero magnitude; the estimate already "
            "maps onto the target or the direction source is degenerate"
        )
    if out is None:
        return vector / norm
    np.divide(vector, norm, out=out)
    return out


def _check_out(out: Optional[np.ndarray], n: int) -> None:
    if out is not None and out.shape != (n,):
        raise ValidationError(
            f"Output buffer must have shape ({n},), got {out.shape}"
        )


def direction_toward(
    jacobian: 'Jacobian',
    residual: np.ndarray,
    out: Optional[np.ndarray] = None,
) -> DirectionEstimate:
    """Newton descent direction from a local Jacobian.

    Solves ``J d = err`` for the linear part ``J`` of the Jacobian and
    normalises ``d``. The returned slope is ``2 err . (J d)``, the rate at
    which ``|F(x) - y|^2`` decreases along ``d`` to first order.

    Parameters
    ----------
    jacobian : Jacobian
        Jacobian of the forward transform at the current estimate.
    residual : np.ndarray
        ``y - F(x)``, shape ``(n,)``.
    out : np.ndarray, optional
        Buffer of shape ``(n,)`` that receives the direction.

    Returns
    -------
    DirectionEstimate
        Unit direction and its directional-derivative slope.

    Raises
    ------
    ValidationError
        If ``residual`` or ``out`` does not match the Jacobian size.
    NumericDegeneracyError
        If the Jacobian is singular or the direction is degenerate.
    """
    linear = jacobian.linear
    n = linear.shape[0]
    if residual.shape != (n,):
        raise ValidationError(
            f"Residual must have shape ({n},), got {residual.shape}"
        )
    _check_out(out, n)

    try:
        step = np.linalg.solve(linear, residual)
    except np.linalg.LinAlgError as exc:
        raise NumericDegeneracyError(
            f"Jacobian is singular at {jacobian.point}"
        ) from exc

    direction = normalize_direction(step, out)
    slope = 2.0 * float(residual @ (linear @ direction))
    return DirectionEstimate(direction, slope)


def displacement_direction(
    displacement: np.ndarray,
    out: Optional[np.ndarray] = None,
) -> DirectionEstimate:
    """Descent direction of a deformation field.

    Uses the negated displacement stored in the field at the current
    estimate: for ``F(x) = x + u(x)`` the displacement at ``x`` already
    points along the residual, so ``-u(x)`` moves back toward the
    inverse without inverting a Jacobian.

    Parameters
    ----------
    displacement : np.ndarray
        Field displacement ``u(x)``, shape ``(n,)``.
    out : np.ndarray, optional
        Buffer of shape ``(n,)`` that receives the direction.

    Returns
    -------
    DirectionEstimate
        Unit direction; ``slope`` is None.
    """
    _check_out(out, displacement.shape[0])
    return DirectionEstimate(normalize_direction(-displacement, out), None)
