# -*- coding: utf-8 -*-
"""
Backtracking Line Search - Armijo step-size selection.

Starting from an initial step ``t0``, the search shrinks the step
geometrically until the squared error to the target decreases
sufficiently along the given direction:

    |F(x + t d) - y|^2  <  |F(x) - y|^2 - c * t * m

The search always returns the last step it tried, so the returned step is
``t0 * beta**k`` for some ``0 <= k <= max_line_search_tries``; whether the
condition was met is reported separately on the result.

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
from typing import Optional

# Third-party
import numpy as np

# invxform internal
from invxform.inverse.config import SolverConfig
from invxform.transforms.base import RealTransform

logger = logging.getLogger(__name__)

#: Expected-decrease constant used when no directional derivative exists.
DEFAULT_ARMIJO_SLOPE = 1.0


def squared_error(mapped: np.ndarray, target: np.ndarray) -> float:
    """Squared Euclidean distance between ``F(x)`` and the target."""
    diff = mapped - target
    return float(diff @ diff)


class LineSearchResult:
    """Outcome of one backtracking line search.

    Attributes
    ----------
    step_size : float
        Last step tried, ``t0 * beta**num_shrinks``.
    accepted : bool
        Whether ``step_size`` satisfied the Armijo condition.
    num_shrinks : int
        Number of times the step was shrunk.
    squared_error : float
        Squared error of the last evaluated candidate. When the search
        was not accepted this belongs to the step before the final
        shrink.
    """

    __slots__ = ('step_size', 'accepted', 'num_shrinks', 'squared_error')

    def __init__(
        self,
        step_size: float,
        accepted: bool,
        num_shrinks: int,
        squared_error: float,
    ) -> None:
        self.step_size = step_size
        self.accepted = accepted
        self.num_shrinks = num_shrinks
        self.squared_error = squared_error

    def __repr__(self) -> str:
        return (
            f"LineSearchResult(step_size={self.step_size:.6g}, "
            f"accepted={self.accepted}, shrinks={self.num_shrinks})"
        )


class BacktrackingLineSearch:
    """Armijo backtracking line search.

    Parameters
    ----------
    config : SolverConfig, optional
        Provides ``max_line_search_tries``, ``armijo_constant``,
        ``step_shrink`` and ``armijo_slope``. Defaults to
        ``SolverConfig()``.
    """

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self.config = config if config is not None else SolverConfig()

    def expected_slope(self, slope: Optional[float]) -> float:
        """The ``m`` term of the Armijo test.

        A fixed ``config.armijo_slope`` takes precedence. Otherwise the
        directional derivative is used when it is available and positive,
        and ``DEFAULT_ARMIJO_SLOPE`` when it is not.
        """
        if self.config.armijo_slope is not None:
            return self.config.armijo_slope
        if slope is None or not np.isfinite(slope) or slope <= 0.0:
            return DEFAULT_ARMIJO_SLOPE
        return slope

    def search(
        self,
        transform: RealTransform,
        target: np.ndarray,
        x: np.ndarray,
        direction: np.ndarray,
        fx: float,
        t0: float,
        slope: Optional[float] = None,
    ) -> LineSearchResult:
        """Find a step size along ``direction`` from ``x``.

        Parameters
        ----------
        transform : RealTransform
            Forward transform ``F``.
        target : np.ndarray
            Target point ``y``, shape ``(n,)``.
        x : np.ndarray
            Current estimate, shape ``(n,)``. Not modified.
        direction : np.ndarray
            Unit descent direction, shape ``(n,)``.
        fx : float
            Squared error ``|F(x) - y|^2`` at the current estimate.
        t0 : float
            Initial step size.
        slope : float, optional
            Directional derivative of the squared error along
            ``direction``; see ``expected_slope``.

        Returns
        -------
        LineSearchResult
        """
        cfg = self.config
        m = self.expected_slope(slope)
        t = t0
        fx_ap = np.inf
        accepted = False
        k = 0
        while k < cfg.max_line_search_tries:
            x_ap = x + t * direction
            fx_ap = squared_error(transform.apply(x_ap), target)
            if fx_ap < fx - cfg.armijo_constant * t * m:
                accepted = True
                break
            t *= cfg.step_shrink
            k += 1

        logger.debug(
            "Line search %s after %d shrinks: step %.6g (from %.6g)",
            'accepted' if accepted else 'exhausted', k, t, t0,
        )
        return LineSearchResult(t, accepted, k, fx_ap)
