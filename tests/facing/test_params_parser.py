"""Tests for facing/params_parser.py."""
import json

import pytest

from facing.params_parser import (
    ParseError,
    load_params_file,
    parse_generation_params,
    params_to_dict,
    to_snake_case,
    toolpath_from_dict,
    toolpath_to_dict,
)
from facing.toolpath_generator import generate_toolpath


class TestSnakeCase:
    """Tests for to_snake_case."""

    @pytest.mark.parametrize('key,expected', [
        ('safeZHeight', 'safe_z_height'),
        ('toolRadius', 'tool_radius'),
        ('spiralSegmentsPerRevolution', 'spiral_segments_per_revolution'),
        ('tool_radius', 'tool_radius'),
        ('xy', 'xy'),
    ])
    def test_conversion(self, key, expected):
        assert to_snake_case(key) == expected


class TestParseGenerationParams:
    """Tests for parse_generation_params."""

    def test_camel_case_payload(self, sample_payload):
        params = parse_generation_params(sample_payload)
        assert params.stock.width == 60.0
        assert params.stock.origin_position == 'front-left'
        assert params.cutting.tool_radius == 3.0
        assert params.cutting.safe_z_height == 5.0
        assert params.pattern.type == 'zigzag'
        assert params.feeds.spindle_speed == 10000.0

    def test_defaults(self, sample_payload):
        params = parse_generation_params(sample_payload)
        assert params.cutting.z_offset == 0.0
        assert params.cutting.clear_stock_exit is True
        assert params.cutting.finishing_pass is False
        assert params.pattern.spiral_direction == 'outside-in'
        assert params.pattern.spiral_segments_per_revolution == 36

    def test_stock_axis_aliases(self, sample_payload):
        sample_payload['stock'] = {'x': 120, 'y': 80, 'z': 15}
        params = parse_generation_params(sample_payload)
        assert (params.stock.width, params.stock.depth, params.stock.height) == (120.0, 80.0, 15.0)

    def test_integers_become_floats(self, sample_payload):
        sample_payload['feeds']['xy'] = 800
        params = parse_generation_params(sample_payload)
        assert isinstance(params.feeds.xy, float)

    def test_missing_section(self, sample_payload):
        del sample_payload['feeds']
        with pytest.raises(ParseError, match="Missing or invalid 'feeds' section"):
            parse_generation_params(sample_payload)

    def test_missing_required_field(self, sample_payload):
        del sample_payload['cutting']['toolRadius']
        with pytest.raises(ParseError, match="cutting.tool_radius"):
            parse_generation_params(sample_payload)

    def test_wrong_types(self, sample_payload):
        sample_payload['cutting']['stepover'] = 'fifty'
        sample_payload['cutting']['finishingPass'] = 'yes'
        sample_payload['feeds']['z'] = True
        with pytest.raises(ParseError) as exc_info:
            parse_generation_params(sample_payload)
        message = str(exc_info.value)
        assert message.startswith("Errors found in parameters:")
        assert "cutting.stepover" in message
        assert "cutting.finishing_pass" in message
        assert "feeds.z" in message

    def test_fractional_segment_count_rejected(self, sample_payload):
        sample_payload['pattern']['spiralSegmentsPerRevolution'] = 36.5
        with pytest.raises(ParseError, match="whole number"):
            parse_generation_params(sample_payload)

    def test_not_a_dict(self):
        with pytest.raises(ParseError):
            parse_generation_params(['not', 'a', 'dict'])

    def test_params_round_trip(self, sample_payload):
        params = parse_generation_params(sample_payload)
        assert parse_generation_params(params_to_dict(params)) == params


class TestLoadParamsFile:
    """Tests for load_params_file."""

    def test_load(self, tmp_path, sample_payload):
        path = tmp_path / 'job.json'
        path.write_text(json.dumps(sample_payload))
        assert load_params_file(str(path)).stock.depth == 40.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            load_params_file(str(tmp_path / 'missing.json'))

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.json'
        path.write_text('   ')
        with pytest.raises(ParseError, match="empty"):
            load_params_file(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{"stock": ')
        with pytest.raises(ParseError, match="Invalid JSON"):
            load_params_file(str(path))


class TestToolpathSerialization:
    """Tests for toolpath_to_dict and toolpath_from_dict."""

    def test_unset_fields_omitted(self, make_params):
        data = toolpath_to_dict(generate_toolpath(make_params(total_depth=1.0)))
        first = data[0][0]
        assert 'i' not in first and 'j' not in first
        assert first['type'] == 'rapid'

    def test_rebuild(self, make_params):
        toolpath = generate_toolpath(make_params(pattern_type='spiral', total_depth=1.0))
        assert toolpath_from_dict(toolpath_to_dict(toolpath)) == toolpath

    def test_camel_case_points(self):
        toolpath = toolpath_from_dict([[{'x': 1, 'y': 2, 'z': 3, 'feedRate': 400, 'type': 'linear'}]])
        assert toolpath[0][0].feed_rate == 400

    def test_invalid_point(self):
        with pytest.raises(ParseError, match="Invalid point in level 0"):
            toolpath_from_dict([[{'x': 1, 'y': 2, 'z': 3, 'speed': 10}]])

    def test_invalid_structure(self):
        with pytest.raises(ParseError):
            toolpath_from_dict({'levels': []})
        with pytest.raises(ParseError):
            toolpath_from_dict([{'x': 1}])
