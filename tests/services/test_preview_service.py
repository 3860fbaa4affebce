"""Tests for PreviewService."""
import pytest

from facing.models import ToolpathPoint
from facing.toolpath_generator import generate_toolpath
from web.services.preview_service import Colors, PreviewService


class TestGenerateSvg:
    """Tests for single-level SVG output."""

    def test_rectangular_stock(self, square_params):
        toolpath = generate_toolpath(square_params)
        svg = PreviewService.generate_svg(toolpath[-1], square_params)
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
        assert svg.endswith('</svg>')
        assert '<rect ' in svg
        assert Colors.CUT in svg
        assert Colors.ENTRY in svg

    def test_circular_stock(self, circular_params):
        svg = PreviewService.generate_svg([], circular_params)
        assert svg.count('<circle ') == 1
        assert '<path' not in svg

    def test_spiral_arcs_drawn(self, make_params):
        params = make_params(pattern_type='spiral')
        svg = PreviewService.generate_svg(generate_toolpath(params)[0], params)
        assert ' A ' in svg

    def test_rapids_toggle(self, square_params):
        level = [
            ToolpathPoint(x=0.0, y=0.0, z=5.0, type='rapid'),
            ToolpathPoint(x=50.0, y=50.0, z=5.0, type='rapid'),
        ]
        assert Colors.RAPID in PreviewService.generate_svg(level, square_params)
        assert Colors.RAPID not in PreviewService.generate_svg(level, square_params, show_rapids=False)

    def test_feed_moves_joined(self, square_params):
        level = [
            ToolpathPoint(x=0.0, y=0.0, z=-1.0),
            ToolpathPoint(x=10.0, y=0.0, z=-1.0),
            ToolpathPoint(x=10.0, y=10.0, z=-1.0),
            ToolpathPoint(x=0.0, y=10.0, z=-1.0),
        ]
        svg = PreviewService.generate_svg(level, square_params)
        assert svg.count('<path') == 1
        assert svg.count(' L ') == 3


class TestGenerateLevelSvg:
    """Tests for level selection."""

    def test_out_of_range(self, square_params):
        toolpath = generate_toolpath(square_params)
        with pytest.raises(IndexError):
            PreviewService.generate_level_svg(toolpath, square_params, 10)

    def test_defaults_to_last_level(self, square_params):
        toolpath = generate_toolpath(square_params)
        last = PreviewService.generate_level_svg(toolpath, square_params)
        assert last == PreviewService.generate_svg(toolpath[-1], square_params)

    def test_empty_toolpath(self, square_params):
        assert PreviewService.generate_level_svg([], square_params).startswith('<svg')
