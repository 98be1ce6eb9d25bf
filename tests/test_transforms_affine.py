# -*- coding: utf-8 -*-
"""
Affine Transform Tests - Closed-form affine and scale/translation transforms.

Tests AffineTransform and ScaleAndTranslation construction, forward and
analytic inverse mapping, exact Jacobians, element access, and the
InverseTransform view.

Dependencies
------------
pytest

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
from invxform.transforms import (
    AffineTransform,
    InverseTransform,
    InvertibleTransform,
    ScaleAndTranslation,
    as_coordinate,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rotation():
    """3D rotation about the last axis plus a translation."""
    return AffineTransform([
        [0.0, 1.0, 0.0, 0.1],
        [-1.0, 0.0, 0.0, 8.0],
        [0.0, 0.0, 1.0, 50.0],
    ])


@pytest.fixture
def shear_2d():
    """2D affine with shear, scale and shift."""
    return AffineTransform([[1.5, 0.3, -2.0], [0.1, 0.8, 4.0]])


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------

class TestAsCoordinate:

    def test_list_converted(self):
        x = as_coordinate([1, 2, 3])
        assert x.dtype == np.float64
        assert x.shape == (3,)

    def test_scalar_becomes_1d(self):
        assert as_coordinate(4.0).shape == (1,)

    def test_returns_copy(self):
        src = np.array([1.0, 2.0])
        out = as_coordinate(src)
        out[0] = 99.0
        assert src[0] == 1.0

    def test_wrong_length(self):
        with pytest.raises(ValidationError, match="expected 3"):
            as_coordinate([1.0, 2.0], 3, 'source')

    def test_not_1d(self):
        with pytest.raises(ValidationError, match="1D vector"):
            as_coordinate(np.zeros((2, 2)))

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            as_coordinate([1.0], 2)


# ---------------------------------------------------------------------------
# AffineTransform
# ---------------------------------------------------------------------------

class TestAffineTransform:

    def test_dimensions(self, rotation):
        assert rotation.dimensions() == (3, 3)
        assert rotation.num_source_dimensions == 3

    def test_apply(self, rotation):
        y = rotation.apply([3.0, 0.5, 30.0])
        np.testing.assert_allclose(y, [0.6, 5.0, 80.0])

    def test_call_alias(self, shear_2d):
        np.testing.assert_allclose(
            shear_2d([1.0, 2.0]), shear_2d.apply([1.0, 2.0])
        )

    def test_apply_does_not_mutate(self, shear_2d):
        x = np.array([1.0, 2.0])
        shear_2d.apply(x)
        np.testing.assert_array_equal(x, [1.0, 2.0])

    def test_apply_wrong_dimension(self, rotation):
        with pytest.raises(ValidationError):
            rotation.apply([1.0, 2.0])

    def test_homogeneous_input(self):
        xfm = AffineTransform([[2.0, 0.0, 1.0], [0.0, 3.0, -1.0], [0, 0, 1]])
        np.testing.assert_allclose(xfm.apply([1.0, 1.0]), [3.0, 2.0])

    def test_bad_homogeneous_row(self):
        with pytest.raises(ValidationError, match="last row"):
            AffineTransform([[2.0, 0.0, 1.0], [0.0, 3.0, -1.0], [0, 1, 1]])

    def test_bad_shape(self):
        with pytest.raises(ValidationError, match=r"\(n, n\+1\)"):
            AffineTransform(np.zeros((2, 5)))

    def test_identity(self):
        ident = AffineTransform.identity(4)
        x = np.array([1.0, -2.0, 3.0, 0.5])
        np.testing.assert_allclose(ident.apply(x), x)

    def test_inverse_round_trip(self, shear_2d):
        x = np.array([3.0, -7.0])
        inv = shear_2d.inverse()
        assert isinstance(inv, AffineTransform)
        np.testing.assert_allclose(inv.apply(shear_2d.apply(x)), x)

    def test_apply_inverse(self, rotation):
        p = np.array([3.0, 0.5, 30.0])
        np.testing.assert_allclose(
            rotation.apply_inverse(rotation.apply(p)), p
        )

    def test_singular_inverse(self):
        xfm = AffineTransform([[1.0, 2.0, 0.0], [2.0, 4.0, 0.0]])
        with pytest.raises(NumericDegeneracyError):
            xfm.inverse()
        with pytest.raises(NumericDegeneracyError):
            xfm.apply_inverse([1.0, 1.0])

    def test_jacobian_is_linear_part(self, shear_2d):
        jac = shear_2d.jacobian([10.0, -10.0])
        np.testing.assert_allclose(jac.linear, shear_2d.linear)
        np.testing.assert_array_equal(jac.translation, [0.0, 0.0])
        np.testing.assert_array_equal(jac.point, [10.0, -10.0])

    def test_get_set(self, shear_2d):
        assert shear_2d.get(0, 1) == pytest.approx(0.3)
        assert shear_2d.get(1, 2) == pytest.approx(4.0)
        shear_2d.set(1, 2, 5.0)
        np.testing.assert_allclose(shear_2d.translation, [-2.0, 5.0])

    def test_row_packed(self, shear_2d):
        np.testing.assert_allclose(
            shear_2d.row_packed(), [1.5, 0.3, -2.0, 0.1, 0.8, 4.0]
        )

    def test_matrix_is_copy(self, shear_2d):
        mat = shear_2d.matrix
        mat[0, 0] = 100.0
        assert shear_2d.get(0, 0) == pytest.approx(1.5)

    def test_repr(self, shear_2d):
        assert 'AffineTransform' in repr(shear_2d)


# ---------------------------------------------------------------------------
# ScaleAndTranslation
# ---------------------------------------------------------------------------

class TestScaleAndTranslation:

    def test_apply(self):
        xfm = ScaleAndTranslation([2.0, 0.5], [1.0, -1.0])
        np.testing.assert_allclose(xfm.apply([3.0, 4.0]), [7.0, 1.0])

    def test_inverse_precomputed(self):
        xfm = ScaleAndTranslation([2.0, 0.5, -4.0], [1.0, -1.0, 3.0])
        inv = xfm.inverse()
        np.testing.assert_allclose(inv.scales, [0.5, 2.0, -0.25])
        np.testing.assert_allclose(inv.translations, [-0.5, 2.0, 0.75])
        assert inv.inverse() is xfm

    def test_apply_inverse(self):
        xfm = ScaleAndTranslation([2.0, 0.5], [1.0, -1.0])
        x = np.array([-3.0, 9.0])
        np.testing.assert_allclose(xfm.apply_inverse(xfm.apply(x)), x)

    def test_zero_scale(self):
        with pytest.raises(ValidationError, match="non-zero"):
            ScaleAndTranslation([1.0, 0.0], [0.0, 0.0])

    def test_length_mismatch(self):
        with pytest.raises(ValidationError):
            ScaleAndTranslation([1.0, 2.0], [0.0, 0.0, 0.0])

    def test_get(self):
        xfm = ScaleAndTranslation([2.0, 3.0], [5.0, 7.0])
        assert xfm.get(0, 0) == 2.0
        assert xfm.get(1, 1) == 3.0
        assert xfm.get(1, 2) == 7.0
        assert xfm.get(0, 1) == 0.0

    def test_matches_affine(self):
        xfm = ScaleAndTranslation([2.0, 3.0], [5.0, 7.0])
        np.testing.assert_allclose(
            xfm.row_packed(), [2.0, 0.0, 5.0, 0.0, 3.0, 7.0]
        )
        x = np.array([0.25, -8.0])
        np.testing.assert_allclose(xfm.to_affine().apply(x), xfm.apply(x))

    def test_jacobian(self):
        xfm = ScaleAndTranslation([2.0, 3.0], [5.0, 7.0])
        jac = xfm.jacobian([1.0, 1.0])
        np.testing.assert_allclose(jac.linear, np.diag([2.0, 3.0]))


# ---------------------------------------------------------------------------
# InverseTransform view
# ---------------------------------------------------------------------------

class TestInverseTransform:

    def test_swaps_apply(self):
        xfm = ScaleAndTranslation([2.0, 4.0], [1.0, 1.0])
        view = InverseTransform(xfm)
        np.testing.assert_allclose(view.apply([3.0, 5.0]), [1.0, 1.0])
        np.testing.assert_allclose(view.apply_inverse([1.0, 1.0]), [3.0, 5.0])

    def test_inverse_of_view_is_wrapped(self):
        xfm = ScaleAndTranslation([2.0], [1.0])
        assert InverseTransform(xfm).inverse() is xfm

    def test_default_inverse_is_view(self):
        class Shift(InvertibleTransform):
            num_source_dimensions = 1
            num_target_dimensions = 1

            def _apply(self, source):
                return source + 1.0

            def apply_inverse(self, target):
                return as_coordinate(target, 1) - 1.0

        inv = Shift().inverse()
        assert isinstance(inv, InverseTransform)
        np.testing.assert_allclose(inv.apply([5.0]), [4.0])

    def test_requires_invertible(self):
        with pytest.raises(TypeError, match="InvertibleTransform"):
            InverseTransform(object())
