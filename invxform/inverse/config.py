# -*- coding: utf-8 -*-
"""
Solver Configuration - Parameters of the iterative inverse solver.

``SolverConfig`` groups the convergence tolerance, iteration cap and
backtracking line-search parameters. A configuration is validated once
at construction and never mutated; use ``replace`` to derive a modified
copy.

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
import dataclasses
from dataclasses import dataclass
from typing import Any, Optional

# invxform internal
from invxform.exceptions import ValidationError


@dataclass(frozen=True)
class SolverConfig:
    """Iterative inverse solver settings.

    Parameters
    ----------
    max_line_search_tries : int
        Maximum number of step shrinks per line search. Must be >= 1.
        Default 16.
    armijo_constant : float
        Sufficient-decrease constant ``c`` in (0, 1). Default 0.5.
    step_shrink : float
        Factor ``beta`` in (0, 1) applied to a rejected step. Default 0.5.
    max_iterations : int
        Maximum number of solver iterations. Must be >= 1. Default 200.
    tolerance : float
        Convergence threshold on ``|F(x) - y|``. Must be > 0.
        Default 1e-4.
    initial_step_size : float
        Step size tried by the first line search. Must be > 0.
        Default 1.0.
    armijo_slope : float, optional
        Fixed expected-decrease constant ``m`` in the Armijo test
        ``f(x + t d) < f(x) - c t m``. When None (default) the true
        directional derivative of the squared error is used; directions
        that carry no derivative (deformation fields) fall back to 1.0.
    strict : bool
        When True, a solve that stalls or exhausts its iterations raises
        ``ConvergenceError`` instead of returning. Default False.

    Raises
    ------
    ValidationError
        If any value is out of range.
    """

    max_line_search_tries: int = 16
    armijo_constant: float = 0.5
    step_shrink: float = 0.5
    max_iterations: int = 200
    tolerance: float = 1e-4
    initial_step_size: float = 1.0
    armijo_slope: Optional[float] = None
    strict: bool = False

    def __post_init__(self) -> None:
        if int(self.max_line_search_tries) != self.max_line_search_tries \
                or self.max_line_search_tries < 1:
            raise ValidationError(
                f"max_line_search_tries must be an integer >= 1, "
                f"got {self.max_line_search_tries}"
            )
        if not 0.0 < self.armijo_constant < 1.0:
            raise ValidationError(
                f"armijo_constant must be in (0, 1), "
                f"got {self.armijo_constant}"
            )
        if not 0.0 < self.step_shrink < 1.0:
            raise ValidationError(
                f"step_shrink must be in (0, 1), got {self.step_shrink}"
            )
        if int(self.max_iterations) != self.max_iterations \
                or self.max_iterations < 1:
            raise ValidationError(
                f"max_iterations must be an integer >= 1, "
                f"got {self.max_iterations}"
            )
        if not self.tolerance > 0.0:
            raise ValidationError(
                f"tolerance must be > 0, got {self.tolerance}"
            )
        if not self.initial_step_size > 0.0:
            raise ValidationError(
                f"initial_step_size must be > 0, "
                f"got {self.initial_step_size}"
            )
        if self.armijo_slope is not None and not self.armijo_slope > 0.0:
            raise ValidationError(
                f"armijo_slope must be > 0 or None, got {self.armijo_slope}"
            )

    def replace(self, **changes: Any) -> 'SolverConfig':
        """Copy of this configuration with some fields changed.

        Parameters
        ----------
        **changes
            Field names and new values.

        Returns
        -------
        SolverConfig
            New validated configuration.
        """
        return dataclasses.replace(self, **changes)
