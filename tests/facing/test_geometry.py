"""Tests for facing/utils/geometry.py and arc_utils.py."""
import math

import pytest

from facing.utils.geometry import (
    POSITION_TOLERANCE,
    calculate_dog_leg_move,
    calculate_effective_cutting_width,
    calculate_number_of_passes,
    calculate_origin_offset,
    clip_segment_to_box,
    clip_segment_to_circle,
    distance,
    get_line_intersection,
    intersect_segment_circle,
    rotate_point,
)
from facing.utils.arc_utils import (
    calculate_arc_length,
    calculate_arc_sweep,
    calculate_ij_offsets,
    is_clockwise_arc,
    milling_sign,
)


class TestCuttingWidth:
    """Tests for effective width and pass count."""

    def test_effective_width(self):
        assert calculate_effective_cutting_width(3.0, 50.0) == pytest.approx(3.0)
        assert calculate_effective_cutting_width(5.0, 40.0) == pytest.approx(4.0)

    def test_number_of_passes_rounds_up(self):
        assert calculate_number_of_passes(100.0, 3.0) == 34
        assert calculate_number_of_passes(9.0, 3.0) == 3

    def test_number_of_passes_at_least_one(self):
        """Degenerate inputs still give one pass."""
        assert calculate_number_of_passes(0.5, 3.0) == 1
        assert calculate_number_of_passes(0.0, 3.0) == 1
        assert calculate_number_of_passes(10.0, 0.0) == 1


class TestOriginOffset:
    """Tests for calculate_origin_offset."""

    @pytest.mark.parametrize('origin,expected', [
        ('front-left', (0.0, 0.0)),
        ('center-center', (-50.0, -20.0)),
        ('back-right', (-100.0, -40.0)),
        ('front-right', (-100.0, 0.0)),
        ('back-center', (-50.0, -40.0)),
    ])
    def test_offsets(self, origin, expected):
        assert calculate_origin_offset(100.0, 40.0, origin) == pytest.approx(expected)

    @pytest.mark.parametrize('origin', ['middle-left', 'front', 'front-top', '', None])
    def test_unknown_origin_raises(self, origin):
        with pytest.raises(ValueError, match="Invalid origin position"):
            calculate_origin_offset(100.0, 40.0, origin)


class TestRotatePoint:
    """Tests for rotate_point."""

    def test_quarter_turn(self):
        x, y = rotate_point((10.0, 0.0), (0.0, 0.0), 90)
        assert x == pytest.approx(0.0, abs=1e-12)
        assert y == pytest.approx(10.0)

    def test_whole_turn_returns_exact_input(self):
        point = (12.345678, -9.87654321)
        assert rotate_point(point, (3.0, 4.0), 360) is point
        assert rotate_point(point, (3.0, 4.0), 0) is point

    def test_preserves_distance_to_center(self):
        center = (5.0, 5.0)
        point = (8.0, 1.0)
        rotated = rotate_point(point, center, 37.5)
        assert distance(rotated, center) == pytest.approx(distance(point, center))


class TestCircleClipping:
    """Tests for intersect_segment_circle and clip_segment_to_circle."""

    def test_intersection_from_outside(self):
        hit = intersect_segment_circle((-20.0, 0.0), (0.0, 0.0), (0.0, 0.0), 10.0)
        assert hit == pytest.approx((-10.0, 0.0))

    def test_intersection_miss(self):
        assert intersect_segment_circle((-20.0, 15.0), (20.0, 15.0), (0.0, 0.0), 10.0) is None

    def test_intersection_segment_too_short(self):
        assert intersect_segment_circle((-20.0, 0.0), (-15.0, 0.0), (0.0, 0.0), 10.0) is None

    def test_clip_through(self):
        start, end = clip_segment_to_circle((-20.0, 0.0), (20.0, 0.0), (0.0, 0.0), 10.0)
        assert start == pytest.approx((-10.0, 0.0))
        assert end == pytest.approx((10.0, 0.0))

    def test_clip_inside_unchanged(self):
        p1, p2 = (-2.0, 1.0), (3.0, -1.0)
        assert clip_segment_to_circle(p1, p2, (0.0, 0.0), 10.0) == (p1, p2)

    def test_clip_outside(self):
        assert clip_segment_to_circle((-20.0, 11.0), (20.0, 11.0), (0.0, 0.0), 10.0) is None

    def test_clip_one_end_inside(self):
        start, end = clip_segment_to_circle((0.0, 0.0), (20.0, 0.0), (0.0, 0.0), 10.0)
        assert start == (0.0, 0.0)
        assert end == pytest.approx((10.0, 0.0))

    def test_clip_round_trip(self):
        """Clipping an already clipped chord returns it unchanged."""
        chord = clip_segment_to_circle((-30.0, 4.0), (30.0, 4.0), (0.0, 0.0), 10.0)
        again = clip_segment_to_circle(chord[0], chord[1], (0.0, 0.0), 10.0)
        assert again[0] == pytest.approx(chord[0], abs=POSITION_TOLERANCE)
        assert again[1] == pytest.approx(chord[1], abs=POSITION_TOLERANCE)


class TestBoxClipping:
    """Tests for clip_segment_to_box."""

    BOX = (0.0, 0.0, 100.0, 50.0)

    def test_clip_horizontal(self):
        start, end = clip_segment_to_box((-10.0, 25.0), (110.0, 25.0), self.BOX)
        assert start == pytest.approx((0.0, 25.0))
        assert end == pytest.approx((100.0, 25.0))

    def test_inside_unchanged(self):
        p1, p2 = (10.0, 10.0), (90.0, 40.0)
        result = clip_segment_to_box(p1, p2, self.BOX)
        assert result[0] is p1
        assert result[1] is p2

    def test_parallel_outside_rejected(self):
        assert clip_segment_to_box((-10.0, 60.0), (110.0, 60.0), self.BOX) is None
        assert clip_segment_to_box((-5.0, -10.0), (-5.0, 60.0), self.BOX) is None

    def test_diagonal(self):
        start, end = clip_segment_to_box((-10.0, -10.0), (60.0, 60.0), self.BOX)
        assert start == pytest.approx((0.0, 0.0))
        assert end == pytest.approx((50.0, 50.0))

    def test_clip_round_trip(self):
        first = clip_segment_to_box((-10.0, 5.0), (120.0, 45.0), self.BOX)
        second = clip_segment_to_box(first[0], first[1], self.BOX)
        assert second[0] == pytest.approx(first[0], abs=POSITION_TOLERANCE)
        assert second[1] == pytest.approx(first[1], abs=POSITION_TOLERANCE)


class TestLineIntersection:
    """Tests for get_line_intersection."""

    def test_horizontal_line(self):
        point = get_line_intersection(5.0, 3.0, True, (0.0, 0.0), True)
        assert point == pytest.approx((4.0, 3.0))

    def test_vertical_line_negative_root(self):
        point = get_line_intersection(5.0, 4.0, False, (0.0, 0.0), False)
        assert point == pytest.approx((4.0, -3.0))

    def test_miss(self):
        assert get_line_intersection(5.0, 6.0, True, (0.0, 0.0), True) is None


class TestDogLeg:
    """Tests for calculate_dog_leg_move."""

    def test_knee_farthest_from_center(self):
        moves = calculate_dog_leg_move((10.0, 0.0), (0.0, 10.0), (0.0, 0.0))
        assert moves == [(10.0, 10.0), (0.0, 10.0)]

    def test_axis_aligned_single_move(self):
        assert calculate_dog_leg_move((0.0, 0.0), (5.0, 0.0), (20.0, 20.0)) == [(5.0, 0.0)]

    def test_same_point(self):
        assert calculate_dog_leg_move((1.0, 1.0), (1.0, 1.0), (0.0, 0.0)) == [(1.0, 1.0)]


class TestArcUtils:
    """Tests for arc direction and length helpers."""

    def test_milling_sign(self):
        assert milling_sign('climb') == 1
        assert milling_sign('conventional') == -1

    def test_short_way_direction(self):
        assert is_clockwise_arc((10.0, 0.0), (0.0, -10.0), (0.0, 0.0)) is True
        assert is_clockwise_arc((10.0, 0.0), (0.0, 10.0), (0.0, 0.0)) is False

    def test_ij_offsets(self):
        assert calculate_ij_offsets((5.0, 2.0), (1.0, 1.0)) == (-4.0, -1.0)

    def test_sweep_signs(self):
        ccw = calculate_arc_sweep((1.0, 0.0), (0.0, 1.0), (0.0, 0.0), False)
        cw = calculate_arc_sweep((1.0, 0.0), (0.0, 1.0), (0.0, 0.0), True)
        assert ccw == pytest.approx(math.pi / 2)
        assert cw == pytest.approx(-3 * math.pi / 2)

    def test_semicircle_length(self):
        length = calculate_arc_length((3.0, 0.0), (-3.0, 0.0), (0.0, 0.0), False)
        assert length == pytest.approx(3 * math.pi)
