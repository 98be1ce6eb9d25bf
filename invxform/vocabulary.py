# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for the invxform package.

Defines the single source of truth for the controlled vocabularies used
by the inversion engine: the terminal states of an iterative inversion
and the kinds of derivative information a Jacobian source provides.

Author
------
Steven Siebert

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

from enum import Enum


class SolverStatus(Enum):
    """States of the iterative inverse solver.

    ``SEARCHING`` is the only non-terminal state. Every ``solve`` call
    ends in exactly one of the three terminal states and returns the
    best estimate found.
    """

    SEARCHING = "searching"
    CONVERGED = "converged"
    STALLED = "stalled"
    EXHAUSTED = "exhausted"

    @property
    def is_terminal(self) -> bool:
        """Whether the solver stops in this state."""
        return self is not SolverStatus.SEARCHING


class JacobianKind(Enum):
    """Where a solver gets its descent direction from.

    Used to tag ``JacobianSource`` variants.
    """

    EXACT = "exact"
    FINITE_DIFFERENCE = "finite_difference"
    DISPLACEMENT_FIELD = "displacement_field"
