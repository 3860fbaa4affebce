"""Tests for facing/statistics.py."""
import math

import pytest

from facing.models import ToolpathPoint
from facing.statistics import (
    DEFAULT_RAPID_RATE,
    calculate_move_length,
    calculate_stock_area,
    calculate_toolpath_statistics,
)
from facing.toolpath_generator import generate_toolpath


@pytest.fixture
def simple_toolpath():
    return [[
        ToolpathPoint(x=0.0, y=0.0, z=5.0, type='rapid'),
        ToolpathPoint(x=0.0, y=0.0, z=-1.0, feed_rate=300.0),
        ToolpathPoint(x=10.0, y=0.0, z=-1.0, feed_rate=1000.0),
        ToolpathPoint(x=10.0, y=0.0, z=5.0, type='rapid'),
    ]]


class TestMoveLength:
    """Tests for calculate_move_length."""

    def test_straight(self):
        a = ToolpathPoint(x=0.0, y=0.0, z=0.0)
        b = ToolpathPoint(x=3.0, y=4.0, z=0.0)
        assert calculate_move_length(a, b) == pytest.approx(5.0)

    def test_arc_measured_along_curve(self):
        a = ToolpathPoint(x=3.0, y=0.0, z=-1.0)
        b = ToolpathPoint(x=-3.0, y=0.0, z=-1.0, type='arc', i=-3.0, j=0.0, clockwise=False)
        assert calculate_move_length(a, b) == pytest.approx(3 * math.pi)


class TestStockArea:
    """Tests for calculate_stock_area."""

    def test_rectangular(self, make_params):
        assert calculate_stock_area(make_params(width=50.0, depth=20.0)) == pytest.approx(1000.0)

    def test_circular(self, circular_params):
        assert calculate_stock_area(circular_params) == pytest.approx(math.pi * 1600.0)


class TestToolpathStatistics:
    """Tests for calculate_toolpath_statistics."""

    def test_distances_and_time(self, make_params, simple_toolpath):
        params = make_params(total_depth=1.0, stepdown=1.0)
        stats = calculate_toolpath_statistics(simple_toolpath, params)
        assert stats.cutting_distance == pytest.approx(16.0)
        assert stats.rapid_distance == pytest.approx(12.0)
        assert stats.total_distance == pytest.approx(28.0)
        assert stats.estimated_time == pytest.approx(6 / 300 + 10 / 1000 + 12 / DEFAULT_RAPID_RATE)
        assert stats.point_count == 4

    def test_material_removed(self, make_params, simple_toolpath):
        params = make_params(total_depth=1.0, stepdown=1.0)
        stats = calculate_toolpath_statistics(simple_toolpath, params)
        assert stats.material_removed == pytest.approx(10000.0)
        assert stats.roughing_passes == 1
        assert stats.finishing_pass is False

    def test_partial_toolpath_counts_completed_levels(self, make_params):
        """A cancelled run only counts the levels it produced."""
        params = make_params()
        toolpath = generate_toolpath(params)[:2]
        stats = calculate_toolpath_statistics(toolpath, params)
        assert stats.roughing_passes == 2
        assert stats.material_removed == pytest.approx(100.0 * 100.0 * 6.0)

    def test_finishing_flag(self, make_params):
        params = make_params(finishing_pass=True, finishing_pass_height=0.5)
        stats = calculate_toolpath_statistics(generate_toolpath(params), params)
        assert stats.roughing_passes == 4
        assert stats.finishing_pass is True
        assert stats.material_removed == pytest.approx(100.0 * 100.0 * 10.0)

    def test_rapid_rate_override(self, make_params, simple_toolpath):
        params = make_params(total_depth=1.0, stepdown=1.0)
        slow = calculate_toolpath_statistics(simple_toolpath, params, rapid_rate=100.0)
        fast = calculate_toolpath_statistics(simple_toolpath, params, rapid_rate=10000.0)
        assert slow.estimated_time > fast.estimated_time

    def test_to_dict(self, make_params, simple_toolpath):
        stats = calculate_toolpath_statistics(simple_toolpath, make_params())
        data = stats.to_dict()
        assert set(data) == {
            'total_distance', 'cutting_distance', 'rapid_distance', 'estimated_time',
            'material_removed', 'roughing_passes', 'finishing_pass', 'point_count'
        }

    def test_empty(self, square_params):
        stats = calculate_toolpath_statistics([], square_params)
        assert stats.total_distance == 0.0
        assert stats.material_removed == 0.0
