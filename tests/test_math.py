"""Tests for lsextract._math: combination rule and the array estimator.

Private helpers are tested directly, as are the public entry points.
"""

import numpy as np
import numpy.testing as npt
import pytest

from lsextract import neighborhood_distance_field
from lsextract._math import _combine_axis_distances, _large_value, _shifted

_BIG = float(np.finfo(np.float64).max)


# ===========================================================================
# _large_value
# ===========================================================================

class TestLargeValue:
    def test_float64(self):
        assert _large_value(np.float64) == _BIG

    def test_float32(self):
        assert _large_value(np.float32) == float(np.finfo(np.float32).max)

    def test_uint8(self):
        assert _large_value(np.uint8) == 255.0

    def test_rejects_complex(self):
        with pytest.raises(ValueError):
            _large_value(np.complex128)


# ===========================================================================
# _combine_axis_distances
# ===========================================================================

class TestCombineAxisDistances:
    def test_single_axis(self):
        assert _combine_axis_distances([0.5], _BIG) == pytest.approx(0.5)

    def test_two_axes_right_triangle(self):
        # Legs 3 and 4: distance from the right-angle corner to the hypotenuse.
        assert _combine_axis_distances([3.0, 4.0], _BIG) == pytest.approx(2.4)

    def test_sentinel_left_out(self):
        assert _combine_axis_distances([_BIG, 0.5, _BIG], _BIG) == pytest.approx(0.5)

    def test_all_sentinel(self):
        assert _combine_axis_distances([_BIG, _BIG], _BIG) == _BIG

    def test_empty(self):
        assert _combine_axis_distances([], _BIG) == _BIG

    def test_order_independent(self):
        a = _combine_axis_distances([0.2, 0.7, 0.4], _BIG)
        b = _combine_axis_distances([0.7, 0.4, 0.2], _BIG)
        assert a == b

    def test_small_sentinel(self):
        # Integer pixel types give small sentinels; distances at or above are dropped.
        assert _combine_axis_distances([300.0, 2.0], 255.0) == pytest.approx(2.0)


# ===========================================================================
# _shifted
# ===========================================================================

class TestShifted:
    def test_backward(self):
        a = np.array([1.0, 2.0, 3.0])
        npt.assert_array_equal(_shifted(a, 0, -1, -9.0), [-9.0, 1.0, 2.0])

    def test_forward(self):
        a = np.array([1.0, 2.0, 3.0])
        npt.assert_array_equal(_shifted(a, 0, 1, -9.0), [2.0, 3.0, -9.0])

    def test_second_axis(self):
        a = np.arange(6, dtype=float).reshape(2, 3)
        npt.assert_array_equal(_shifted(a, 1, 1, 0.0), [[1, 2, 0], [4, 5, 0]])

    def test_single_sample(self):
        npt.assert_array_equal(_shifted(np.array([4.0]), 0, -1, 7.0), [7.0])


# ===========================================================================
# neighborhood_distance_field
# ===========================================================================

class TestNeighborhoodDistanceField:
    def test_ramp_midway_crossing(self):
        dist, inside = neighborhood_distance_field(np.array([-1.5, -0.5, 0.5, 1.5]))
        npt.assert_allclose(dist[1:3], [0.5, 0.5])
        assert dist[0] == _BIG
        assert dist[3] == _BIG
        npt.assert_array_equal(inside, [True, True, False, False])

    def test_exact_zero(self):
        dist, inside = neighborhood_distance_field(np.array([-1.0, 0.0, 1.0]))
        assert dist[1] == 0.0
        assert inside[1]
        # A neighbour sitting exactly on the level is not a crossing.
        assert dist[0] == _BIG
        assert dist[2] == _BIG

    def test_level_set_value_shift(self):
        dist, inside = neighborhood_distance_field(
            np.array([0.0, 1.0, 2.0, 3.0]), level_set_value=1.25
        )
        npt.assert_allclose(dist[1:3], [0.25, 0.75])
        npt.assert_array_equal(inside, [True, True, False, False])

    def test_spacing_scales_distance(self):
        dist, _ = neighborhood_distance_field(
            np.array([-1.5, -0.5, 0.5, 1.5]), spacing=(2.0,)
        )
        npt.assert_allclose(dist[1:3], [1.0, 1.0])

    def test_diagonal_plane_2d(self):
        i, j = np.meshgrid(np.arange(4), np.arange(4), indexing="ij")
        phi = (i + j - 2.5) / np.sqrt(2.0)
        dist, _ = neighborhood_distance_field(phi)
        # Exact perpendicular distance to i + j = 2.5.
        assert dist[1, 1] == pytest.approx(0.5 / np.sqrt(2.0))
        assert dist[2, 1] == pytest.approx(0.5 / np.sqrt(2.0))

    def test_closer_neighbour_wins(self):
        # Center -1 between +1 (crossing at 0.5) and +3 (crossing at 0.25).
        dist, _ = neighborhood_distance_field(np.array([1.0, -1.0, 3.0]))
        assert dist[1] == pytest.approx(0.25)

    def test_custom_large_value(self):
        dist, _ = neighborhood_distance_field(np.array([1.0, 2.0]), large_value=-1.0)
        npt.assert_array_equal(dist, [-1.0, -1.0])

    def test_integer_input(self):
        dist, inside = neighborhood_distance_field(np.array([-3, -1, 1, 3], dtype=np.int16))
        npt.assert_allclose(dist[1:3], [0.5, 0.5])
        assert dist[0] == 32767.0
        assert dist.dtype == np.float64

    def test_rejects_spacing_length(self):
        with pytest.raises(ValueError):
            neighborhood_distance_field(np.zeros((2, 2)), spacing=(1.0,))
