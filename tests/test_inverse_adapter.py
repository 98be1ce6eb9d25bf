# -*- coding: utf-8 -*-
"""
Invertible Adapter Tests - Forward transforms with an iterative inverse.

Tests IterativeInvertibleTransform over thin-plate spline and B-spline
transforms, the default choice of Jacobian source, the InverseTransform
view, and deformation-field inversion with displacement directions.

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

import numpy as np
import pytest

from invxform.exceptions import NumericDegeneracyError, ValidationError
from invxform.inverse import (
    DEFORMATION_FIELD_CONFIG,
    ExactJacobian,
    FiniteDifferenceJacobian,
    InvertibleDeformationFieldTransform,
    IterativeInvertibleTransform,
    SolverConfig,
    default_jacobian_source,
)
from invxform.transforms import (
    AffineTransform,
    BSplineTransform,
    DeformationFieldTransform,
    InverseTransform,
    ThinPlateSplineTransform,
)
from invxform.vocabulary import JacobianKind, SolverStatus


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def scaling_tps():
    """Thin-plate spline fitted to a uniform 2x scaling of four landmarks."""
    src = np.array([[-1.0, 0.0], [0.0, -1.0], [1.0, 0.0], [0.0, 1.0]])
    return ThinPlateSplineTransform(src, 2.0 * src)


@pytest.fixture
def smooth_bspline():
    """Cubic B-spline with a smooth, small displacement pattern."""
    gi, gj = np.meshgrid(np.arange(12), np.arange(12), indexing='ij')
    coefs = np.zeros((12, 12, 2))
    coefs[..., 0] = 0.3 * np.sin(gi / 3.0)
    coefs[..., 1] = -0.2 * np.cos(gj / 4.0)
    return BSplineTransform(coefs, [1.0, 1.0], [0.0, 0.0])


@pytest.fixture
def shifted_field():
    """Constant displacement of (2, -1) on a 40 x 40 grid."""
    field = np.zeros((40, 40, 2))
    field[..., 0] = 2.0
    field[..., 1] = -1.0
    return field


# ---------------------------------------------------------------------------
# IterativeInvertibleTransform
# ---------------------------------------------------------------------------

class TestIterativeInvertibleTransform:

    def test_tps_finite_difference(self, scaling_tps):
        inv = IterativeInvertibleTransform(
            scaling_tps,
            FiniteDifferenceJacobian(scaling_tps),
            SolverConfig(tolerance=5e-5),
        )
        result = inv.solve([1.0, 1.0])
        assert result.status is SolverStatus.CONVERGED
        np.testing.assert_allclose(result.estimate, [0.5, 0.5], atol=5e-5)

    def test_tps_exact(self, scaling_tps):
        inv = IterativeInvertibleTransform(
            scaling_tps, config=SolverConfig(tolerance=5e-5)
        )
        assert inv.solver.source.kind is JacobianKind.EXACT
        np.testing.assert_allclose(
            inv.apply_inverse([1.0, 1.0]), [0.5, 0.5], atol=5e-5
        )

    def test_forward_delegates(self, scaling_tps):
        inv = IterativeInvertibleTransform(scaling_tps)
        np.testing.assert_allclose(
            inv.apply([0.25, -0.5]), scaling_tps.apply([0.25, -0.5])
        )
        assert inv.dimensions() == (2, 2)
        assert inv.transform is scaling_tps

    def test_bspline_defaults_to_finite_difference(self, smooth_bspline):
        inv = IterativeInvertibleTransform(
            smooth_bspline, config=SolverConfig(tolerance=1e-6)
        )
        assert inv.solver.source.kind is JacobianKind.FINITE_DIFFERENCE
        p = np.array([5.3, 6.1])
        y = smooth_bspline.apply(p)
        result = inv.solve(y)
        assert result.converged
        np.testing.assert_allclose(smooth_bspline.apply(result.estimate), y,
                                   atol=1e-6)

    def test_inverse_view(self, scaling_tps):
        inv = IterativeInvertibleTransform(
            scaling_tps, config=SolverConfig(tolerance=1e-7)
        )
        view = inv.inverse()
        assert isinstance(view, InverseTransform)
        np.testing.assert_allclose(view.apply([1.0, 1.0]), [0.5, 0.5],
                                   atol=1e-7)
        np.testing.assert_allclose(view.apply_inverse([0.5, 0.5]), [1.0, 1.0])
        assert view.inverse() is inv

    def test_guess_and_step_size(self, scaling_tps):
        inv = IterativeInvertibleTransform(
            scaling_tps, config=SolverConfig(tolerance=1e-7)
        )
        x = inv.apply_inverse([1.0, 1.0], guess=[0.4, 0.6], step_size=0.05)
        np.testing.assert_allclose(x, [0.5, 0.5], atol=1e-7)

    def test_set_tolerance(self, scaling_tps):
        inv = IterativeInvertibleTransform(scaling_tps)
        inv.set_tolerance(1e-9)
        inv.set_max_iterations(50)
        assert inv.config.tolerance == 1e-9
        assert inv.config.max_iterations == 50

    def test_source_must_match(self, scaling_tps):
        other = AffineTransform.identity(2)
        with pytest.raises(ValidationError, match="wrapped transform"):
            IterativeInvertibleTransform(scaling_tps, ExactJacobian(other))

    def test_default_source(self, scaling_tps, smooth_bspline):
        assert isinstance(default_jacobian_source(scaling_tps), ExactJacobian)
        assert isinstance(
            default_jacobian_source(smooth_bspline), FiniteDifferenceJacobian
        )

    def test_repr(self, scaling_tps):
        assert 'exact' in repr(IterativeInvertibleTransform(scaling_tps))


# ---------------------------------------------------------------------------
# Deformation fields
# ---------------------------------------------------------------------------

class TestInvertibleDeformationField:

    def test_defaults(self, shifted_field):
        inv = InvertibleDeformationFieldTransform(shifted_field)
        assert inv.config == DEFORMATION_FIELD_CONFIG
        assert inv.config.tolerance == 0.25
        assert inv.config.max_iterations == 200
        assert inv.solver.source.kind is JacobianKind.DISPLACEMENT_FIELD

    def test_constant_shift(self, shifted_field):
        inv = InvertibleDeformationFieldTransform(shifted_field)
        result = inv.solve([20.0, 20.0])
        assert result.status is SolverStatus.CONVERGED
        assert np.linalg.norm(result.estimate - [18.0, 21.0]) < 0.25

    def test_three_dimensional(self):
        field = np.zeros((20, 20, 20, 3))
        field[...] = [2.0, -1.0, 0.5]
        inv = InvertibleDeformationFieldTransform(field)
        result = inv.solve([10.0, 10.0, 10.0])
        assert result.converged
        assert result.residual < 0.25

    def test_wraps_existing_transform(self, shifted_field):
        xfm = DeformationFieldTransform(shifted_field, spacing=[2.0, 2.0])
        inv = InvertibleDeformationFieldTransform(xfm)
        assert inv.field is xfm
        np.testing.assert_allclose(inv.displacement([4.0, 4.0]), [2.0, -1.0])

    def test_raw_array_geometry(self, shifted_field):
        inv = InvertibleDeformationFieldTransform(
            shifted_field, spacing=[0.5, 0.5], origin=[-5.0, -5.0]
        )
        np.testing.assert_allclose(inv.field.spacing, [0.5, 0.5])
        np.testing.assert_allclose(inv.field.origin, [-5.0, -5.0])

    def test_zero_field_far_from_target(self):
        inv = InvertibleDeformationFieldTransform(np.zeros((10, 10, 2)))
        with pytest.raises(NumericDegeneracyError):
            inv.solve([5.0, 5.0], guess=[2.0, 2.0])
