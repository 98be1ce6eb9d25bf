# -*- coding: utf-8 -*-
"""
Iterative Inverse Solver - Single-point numerical inversion of transforms.

Estimates ``x`` such that ``F(x) ~= y`` for a forward transform ``F`` and a
target ``y`` by descending along unit directions supplied by a
``JacobianSource``, with step sizes chosen by a backtracking Armijo line
search.

State machine::

    SEARCHING --> CONVERGED   |F(x) - y| < tolerance
              --> STALLED     a step failed to reduce the error
              --> EXHAUSTED   max_iterations steps taken

Every terminal state returns the best estimate found in an
``InverseResult``; callers distinguish a trustworthy answer from a
best-effort one through ``InverseResult.status``.

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
import math
from typing import Any, List, Optional, Tuple

# Third-party
import numpy as np

# invxform internal
from invxform.exceptions import ConvergenceError, ValidationError
from invxform.inverse.config import SolverConfig
from invxform.inverse.jacobian import JacobianSource
from invxform.inverse.line_search import BacktrackingLineSearch, squared_error
from invxform.transforms.base import RealTransform, as_coordinate
from invxform.vocabulary import SolverStatus

logger = logging.getLogger(__name__)


class InverseResult:
    """Result of a single-point inversion.

    Parameters
    ----------
    status : SolverStatus
        Terminal state: CONVERGED, STALLED, or EXHAUSTED.
    estimate : np.ndarray
        Best source point found, shape ``(n,)``.
    target : np.ndarray
        The target point that was inverted.
    residual : float
        ``|F(estimate) - target|``.
    iterations : int
        Number of descent steps attempted. Zero when the initial guess
        already met the tolerance.
    step_size : float
        Last accepted step size (the initial one if no step was
        accepted).
    errors : List[float]
        Residual at the initial guess followed by the residual at every
        accepted estimate. Strictly decreasing.
    """

    def __init__(
        self,
        status: SolverStatus,
        estimate: np.ndarray,
        target: np.ndarray,
        residual: float,
        iterations: int,
        step_size: float,
        errors: List[float],
    ) -> None:
        self.status = status
        self.estimate = estimate
        self.target = target
        self.residual = residual
        self.iterations = iterations
        self.step_size = step_size
        self.errors = errors

    @property
    def converged(self) -> bool:
        """Whether the residual reached the tolerance."""
        return self.status is SolverStatus.CONVERGED

    def raise_for_status(self) -> 'InverseResult':
        """Raise unless the solve converged.

        Returns
        -------
        InverseResult
            ``self``, for chaining.

        Raises
        ------
        ConvergenceError
            If the status is STALLED or EXHAUSTED.
        """
        if not self.converged:
            raise ConvergenceError(
                f"Inversion {self.status.value} after {self.iterations} "
                f"iterations with residual {self.residual:.6g} at "
                f"{self.estimate.tolist()}",
                result=self,
            )
        return self

    def __repr__(self) -> str:
        return (
            f"InverseResult({self.status.value}, "
            f"residual={self.residual:.6g}, "
            f"iterations={self.iterations})"
        )


class IterativeInverseSolver:
    """Gradient-descent inversion of a square forward transform.

    The same loop serves every ``JacobianSource`` variant: exact
    Jacobians, finite-difference Jacobians, and deformation-field
    displacements.

    All per-call state lives in local variables, so one solver may be
    used from several threads at once. The configuration is read once at
    the start of each call.

    Parameters
    ----------
    source : JacobianSource
        Provides the forward transform and descent directions.
    config : SolverConfig, optional
        Solver settings. Defaults to ``SolverConfig()``.

    Examples
    --------
    >>> solver = IterativeInverseSolver(ExactJacobian(rot),
    ...                                 SolverConfig(tolerance=5e-6))
    >>> result = solver.solve(rot.apply([3.0, 0.5, 30.0]))
    >>> result.status
    <SolverStatus.CONVERGED: 'converged'>
    """

    def __init__(
        self,
        source: JacobianSource,
        config: Optional[SolverConfig] = None,
    ) -> None:
        if not isinstance(source, JacobianSource):
            raise TypeError(
                f"source must be a JacobianSource, "
                f"got {type(source).__name__}"
            )
        self._source = source
        self._config = config if config is not None else SolverConfig()

    @property
    def source(self) -> JacobianSource:
        return self._source

    @property
    def transform(self) -> RealTransform:
        return self._source.transform

    @property
    def ndim(self) -> int:
        return self._source.ndim

    def dimensions(self) -> Tuple[int, int]:
        """Source and target dimensionality of the forward transform."""
        return self._source.transform.dimensions()

    @property
    def config(self) -> SolverConfig:
        return self._config

    @config.setter
    def config(self, value: SolverConfig) -> None:
        if not isinstance(value, SolverConfig):
            raise TypeError(
                f"config must be a SolverConfig, got {type(value).__name__}"
            )
        self._config = value

    def set_tolerance(self, tolerance: float) -> None:
        """Replace the convergence tolerance."""
        self._config = self._config.replace(tolerance=tolerance)

    def set_max_iterations(self, max_iterations: int) -> None:
        """Replace the iteration cap."""
        self._config = self._config.replace(max_iterations=max_iterations)

    def solve(
        self,
        target: Any,
        guess: Optional[Any] = None,
        step_size: Optional[float] = None,
    ) -> InverseResult:
        """Estimate the source point that maps onto ``target``.

        Parameters
        ----------
        target : array-like
            Target point ``y`` of length ``n``.
        guess : array-like, optional
            Initial estimate. Defaults to ``target`` itself, which suits
            transforms close to the identity.
        step_size : float, optional
            Initial line-search step. Defaults to
            ``config.initial_step_size``.

        Returns
        -------
        InverseResult
            Terminal status and best estimate.

        Raises
        ------
        ValidationError
            If ``target`` or ``guess`` has the wrong length, or
            ``step_size`` is not positive.
        NumericDegeneracyError
            If a descent direction cannot be formed (singular Jacobian,
            zero displacement).
        ConvergenceError
            If ``config.strict`` is set and the solve does not converge.
        """
        cfg = self._config
        n = self.ndim
        transform = self._source.transform
        line_search = BacktrackingLineSearch(cfg)

        y = as_coordinate(target, n, 'target')
        if guess is None:
            x = y.copy()
        else:
            x = as_coordinate(guess, n, 'guess')
        t = cfg.initial_step_size if step_size is None else float(step_size)
        if not (np.isfinite(t) and t > 0.0):
            raise ValidationError(f"step_size must be > 0, got {step_size}")

        direction = np.empty(n, dtype=np.float64)
        mapped = transform.apply(x)
        fx = squared_error(mapped, y)
        errors = [math.sqrt(fx)]
        status = SolverStatus.SEARCHING
        iterations = 0

        while status is SolverStatus.SEARCHING:
            if errors[-1] < cfg.tolerance:
                status = SolverStatus.CONVERGED
                break
            if iterations >= cfg.max_iterations:
                status = SolverStatus.EXHAUSTED
                break
            iterations += 1

            estimate = self._source.direction(x, y, mapped, out=direction)
            search = line_search.search(
                transform, y, x, estimate.direction, fx, t, estimate.slope,
            )
            candidate = x + search.step_size * estimate.direction
            candidate_mapped = transform.apply(candidate)
            f_candidate = squared_error(candidate_mapped, y)

            logger.debug(
                "Iteration %d at %s: error %.6g -> %.6g, step %.6g",
                iterations, x.tolist(), errors[-1], math.sqrt(f_candidate),
                search.step_size,
            )
            if f_candidate >= fx:
                status = SolverStatus.STALLED
                break

            x = candidate
            mapped = candidate_mapped
            fx = f_candidate
            t = search.step_size
            errors.append(math.sqrt(fx))

        result = InverseResult(
            status=status,
            estimate=x,
            target=y,
            residual=errors[-1],
            iterations=iterations,
            step_size=t,
            errors=errors,
        )
        logger.debug(
            "Inversion %s after %d iterations, residual %.6g",
            status.value, iterations, result.residual,
        )
        if cfg.strict:
            result.raise_for_status()
        return result

    def __repr__(self) -> str:
        return (
            f"IterativeInverseSolver({self._source!r}, "
            f"tolerance={self._config.tolerance:g}, "
            f"max_iterations={self._config.max_iterations})"
        )
