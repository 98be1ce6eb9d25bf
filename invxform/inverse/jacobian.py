# -*- coding: utf-8 -*-
"""
Jacobian Sources - Local derivative information for iterative inversion.

Defines the ``Jacobian`` matrix type and the ``JacobianSource`` variants
the inverse solver draws descent directions from:

- ``ExactJacobian`` delegates to a transform's analytic derivative.
- ``FiniteDifferenceJacobian`` estimates the derivative of any forward
  transform with forward differences (``n + 1`` evaluations per request).
- ``DisplacementFieldSource`` skips the Jacobian entirely and uses the
  displacement vectors of a deformation field as directions.

A single solver works with all three; see
``invxform.inverse.solver.IterativeInverseSolver``.

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
from typing import Any, Optional

# Third-party
import numpy as np

# invxform internal
from invxform.exceptions import NumericDegeneracyError, ValidationError
from invxform.inverse.direction import (
    DirectionEstimate,
    direction_toward,
    displacement_direction,
)
from invxform.transforms.affine import AffineTransform
from invxform.transforms.base import (
    DifferentiableTransform,
    RealTransform,
    as_coordinate,
)
from invxform.transforms.deformation import DeformationFieldTransform
from invxform.vocabulary import JacobianKind


class Jacobian(AffineTransform):
    """Jacobian matrix of a transform evaluated at a point.

    Stored as an n x (n+1) augmented matrix: the n x n linear part plus a
    translation column, so it can be applied and inverted like any
    ``AffineTransform``. The translation column is the image of the zero
    vector under the linearisation; Jacobians produced by the sources in
    this module have a zero translation column.

    Parameters
    ----------
    linear : array-like
        Linear part, shape ``(n, n)``.
    translation : array-like, optional
        Translation column, shape ``(n,)``. Zero when omitted.
    point : array-like, optional
        Point at which the derivative was evaluated.
    """

    def __init__(
        self,
        linear: Any,
        translation: Optional[Any] = None,
        point: Optional[Any] = None,
    ) -> None:
        lin = np.array(linear, dtype=np.float64)
        if lin.ndim != 2 or lin.shape[0] != lin.shape[1]:
            raise ValidationError(
                f"Jacobian linear part must be square, got shape {lin.shape}"
            )
        n = lin.shape[0]
        if translation is None:
            trans = np.zeros(n)
        else:
            trans = as_coordinate(translation, n, 'translation')
        super().__init__(np.hstack([lin, trans[:, None]]))
        self.point = None if point is None else as_coordinate(point, n, 'point')

    @classmethod
    def zeros(cls, ndim: int, point: Optional[Any] = None) -> 'Jacobian':
        """All-zero Jacobian to be filled column by column."""
        return cls(np.zeros((ndim, ndim)), point=point)

    def inverse(self) -> 'Jacobian':
        """Inverse of the augmented map, evaluated at the same point.

        Raises
        ------
        NumericDegeneracyError
            If the linear part is singular.
        """
        inv = self._inverse_matrix()
        return Jacobian(inv[:, :-1], inv[:, -1], point=self.point)

    def determinant(self) -> float:
        """Determinant of the linear part."""
        return float(np.linalg.det(self._matrix[:, :-1]))


class JacobianSource(ABC):
    """Supplies derivative information about a forward transform.

    Subclasses are tagged with a ``JacobianKind`` and must be safe to use
    from concurrent solves: all scratch is allocated per call.

    Parameters
    ----------
    transform : RealTransform
        Square forward transform (``n_source == n_target``).

    Raises
    ------
    ValidationError
        If the transform is not square.
    """

    kind: JacobianKind

    def __init__(self, transform: RealTransform) -> None:
        if not isinstance(transform, RealTransform):
            raise TypeError(
                f"transform must be a RealTransform, "
                f"got {type(transform).__name__}"
            )
        n_src, n_tgt = transform.dimensions()
        if n_src != n_tgt:
            raise ValidationError(
                f"Iterative inversion requires a square transform, "
                f"got {n_src}D -> {n_tgt}D"
            )
        self._transform = transform

    @property
    def transform(self) -> RealTransform:
        """The forward transform this source differentiates."""
        return self._transform

    @property
    def ndim(self) -> int:
        return self._transform.num_source_dimensions

    @abstractmethod
    def jacobian(self, x: Any) -> Jacobian:
        """Jacobian of the forward transform at ``x``."""
        ...

    def direction(
        self,
        x: np.ndarray,
        target: np.ndarray,
        mapped: Optional[np.ndarray] = None,
        out: Optional[np.ndarray] = None,
    ) -> DirectionEstimate:
        """Unit direction moving ``x`` so that ``F(x)`` nears ``target``.

        Parameters
        ----------
        x : np.ndarray
            Current estimate, shape ``(n,)``.
        target : np.ndarray
            Target point, shape ``(n,)``.
        mapped : np.ndarray, optional
            ``F(x)`` if the caller already has it.
        out : np.ndarray, optional
            Buffer that receives the direction.

        Returns
        -------
        DirectionEstimate
        """
        if mapped is None:
            mapped = self._transform.apply(x)
        return direction_toward(self.jacobian(x), target - mapped, out)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._transform!r})"


class ExactJacobian(JacobianSource):
    """Analytic Jacobian supplied by a ``DifferentiableTransform``.

    Parameters
    ----------
    transform : DifferentiableTransform
        Transform with its own ``jacobian`` method.
    """

    kind = JacobianKind.EXACT

    def __init__(self, transform: DifferentiableTransform) -> None:
        if not isinstance(transform, DifferentiableTransform):
            raise TypeError(
                f"ExactJacobian requires a DifferentiableTransform, "
                f"got {type(transform).__name__}"
            )
        super().__init__(transform)

    def jacobian(self, x: Any) -> Jacobian:
        return self._transform.jacobian(x)


class FiniteDifferenceJacobian(JacobianSource):
    """Forward-difference estimate of the Jacobian of any transform.

    Column ``i`` of the Jacobian at ``x`` is
    ``(F(x + step * e_i) - F(x)) / step``. Each request costs ``n + 1``
    forward evaluations. Choose ``step`` small relative to the curvature
    scale of the transform but large relative to floating-point noise in
    its output.

    Parameters
    ----------
    transform : RealTransform
        Square forward transform.
    step : float
        Finite-difference step. Must be > 0. Default 1e-6.

    Examples
    --------
    >>> fd = FiniteDifferenceJacobian(tps, step=1e-6)
    >>> fd.jacobian([0.5, 0.5]).linear
    """

    kind = JacobianKind.FINITE_DIFFERENCE

    def __init__(self, transform: RealTransform, step: float = 1e-6) -> None:
        super().__init__(transform)
        self.step = step

    @property
    def step(self) -> float:
        return self._step

    @step.setter
    def step(self, value: float) -> None:
        value = float(value)
        if not (np.isfinite(value) and value > 0.0):
            raise ValidationError(f"step must be > 0, got {value}")
        self._step = value

    def jacobian(self, x: Any) -> Jacobian:
        n = self.ndim
        x = as_coordinate(x, n, 'x')
        step = self._step

        jac = np.empty((n, n), dtype=np.float64)
        qc = self._transform.apply(x)
        p = x.copy()
        for i in range(n):
            p[i] = x[i] + step
            jac[:, i] = (self._transform.apply(p) - qc) / step
            p[i] = x[i]

        if not np.all(np.isfinite(jac)):
            raise NumericDegeneracyError(
                f"Finite-difference Jacobian is not finite at {x.tolist()}"
            )
        return Jacobian(jac, point=x)


class DisplacementFieldSource(JacobianSource):
    """Directions read directly from a deformation field.

    For ``F(x) = x + u(x)`` the direction at the estimate ``x`` is
    ``-u(x)``, normalised. No Jacobian is formed, so the direction
    carries no slope and the line search uses its constant Armijo
    term.

    Parameters
    ----------
    field : DeformationFieldTransform
        Deformation field with read access to its displacements.
    """

    kind = JacobianKind.DISPLACEMENT_FIELD

    def __init__(self, field: DeformationFieldTransform) -> None:
        if not isinstance(field, DeformationFieldTransform):
            raise TypeError(
                f"DisplacementFieldSource requires a "
                f"DeformationFieldTransform, got {type(field).__name__}"
            )
        super().__init__(field)

    def jacobian(self, x: Any) -> Jacobian:
        raise NotImplementedError(
            "DisplacementFieldSource provides displacement directions, "
            "not Jacobians"
        )

    def direction(
        self,
        x: np.ndarray,
        target: np.ndarray,
        mapped: Optional[np.ndarray] = None,
        out: Optional[np.ndarray] = None,
    ) -> DirectionEstimate:
        return displacement_direction(self._transform.displacement(x), out)
