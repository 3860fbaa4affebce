import json
import re
from dataclasses import asdict
from typing import Any, Dict, List

from .models import (
    CuttingParameters,
    FacingPattern,
    FeedRates,
    StockGeometry,
    ToolpathGenerationParams,
    ToolpathPoint,
)


class ParseError(Exception):
    """Custom exception for parsing errors."""
    pass


# Alternate key names accepted per section, mapped to field names
STOCK_ALIASES = {'x': 'width', 'y': 'depth', 'z': 'height'}

# field -> (type, required)
STOCK_FIELDS = {
    'shape': (str, False),
    'width': (float, False),
    'depth': (float, False),
    'diameter': (float, False),
    'height': (float, False),
    'origin_position': (str, False),
}
CUTTING_FIELDS = {
    'tool_radius': (float, True),
    'stepover': (float, True),
    'stepdown': (float, True),
    'total_depth': (float, True),
    'safe_z_height': (float, True),
    'z_offset': (float, False),
    'clear_stock_exit': (bool, False),
    'finishing_pass': (bool, False),
    'finishing_pass_height': (float, False),
    'finishing_pass_offset': (float, False),
}
PATTERN_FIELDS = {
    'type': (str, False),
    'angle': (float, False),
    'milling_direction': (str, False),
    'spiral_segments_per_revolution': (int, False),
    'spiral_direction': (str, False),
}
FEED_FIELDS = {
    'xy': (float, True),
    'z': (float, True),
    'spindle_speed': (float, True),
}


def to_snake_case(key: str) -> str:
    """'safeZHeight' -> 'safe_z_height'; snake_case keys pass through."""
    return re.sub(r'(?<!^)(?=[A-Z])', '_', key).lower()


def _normalize_keys(data: Dict[str, Any], aliases: Dict[str, str] = None) -> Dict[str, Any]:
    normalized = {}
    for key, value in data.items():
        name = to_snake_case(key)
        if aliases and name in aliases:
            name = aliases[name]
        normalized[name] = value
    return normalized


def _coerce(value: Any, expected: type, field_name: str) -> Any:
    if expected is bool:
        if isinstance(value, bool):
            return value
        raise ParseError(f"Field '{field_name}' must be true or false, got {value!r}")
    if expected is str:
        if isinstance(value, str):
            return value
        raise ParseError(f"Field '{field_name}' must be a string, got {value!r}")
    # Numbers; reject booleans, which are ints in Python
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Field '{field_name}' must be a number, got {value!r}")
    if expected is int:
        if float(value) != int(value):
            raise ParseError(f"Field '{field_name}' must be a whole number, got {value!r}")
        return int(value)
    return float(value)


def _parse_section(
    data: Dict[str, Any],
    section: str,
    fields: Dict[str, tuple],
    aliases: Dict[str, str] = None
) -> Dict[str, Any]:
    raw = data.get(section)
    if not isinstance(raw, dict):
        raise ParseError(f"Missing or invalid '{section}' section")

    values = _normalize_keys(raw, aliases)
    kwargs = {}
    errors = []
    for name, (expected, required) in fields.items():
        if values.get(name) is None:
            if required:
                errors.append(f"Missing required field '{section}.{name}'")
            continue
        try:
            kwargs[name] = _coerce(values[name], expected, f"{section}.{name}")
        except ParseError as e:
            errors.append(str(e))

    if errors:
        raise ParseError("\n".join(errors))
    return kwargs


def parse_generation_params(data: Dict[str, Any]) -> ToolpathGenerationParams:
    """
    Build generation parameters from a JSON-style dict.

    Keys may be snake_case or camelCase. Stock sizes may also be given
    as x/y/z.

    Raises:
        ParseError: On missing sections, missing required fields or
            values of the wrong type
    """
    if not isinstance(data, dict):
        raise ParseError("Parameters must be a JSON object")

    errors = []
    sections = {}
    for section, fields, aliases in (
        ('stock', STOCK_FIELDS, STOCK_ALIASES),
        ('cutting', CUTTING_FIELDS, None),
        ('pattern', PATTERN_FIELDS, None),
        ('feeds', FEED_FIELDS, None),
    ):
        try:
            sections[section] = _parse_section(data, section, fields, aliases)
        except ParseError as e:
            errors.append(str(e))

    if errors:
        raise ParseError("Errors found in parameters:\n" + "\n".join(f"- {error}" for error in errors))

    return ToolpathGenerationParams(
        stock=StockGeometry(**sections['stock']),
        cutting=CuttingParameters(**sections['cutting']),
        pattern=FacingPattern(**sections['pattern']),
        feeds=FeedRates(**sections['feeds'])
    )


def load_params_file(file_path: str) -> ToolpathGenerationParams:
    """Read and parse a JSON parameter file."""
    try:
        with open(file_path, 'r') as f:
            content = f.read()
    except FileNotFoundError:
        raise ParseError(f"Parameter file not found: {file_path}")
    except OSError as e:
        raise ParseError(f"Error reading file {file_path}: {str(e)}")

    if not content.strip():
        raise ParseError("Parameter file is empty")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {file_path}: {e.msg} (line {e.lineno})")

    return parse_generation_params(data)


def params_to_dict(params: ToolpathGenerationParams) -> Dict[str, Any]:
    return asdict(params)


def toolpath_to_dict(toolpath: List[List[ToolpathPoint]]) -> List[List[Dict[str, Any]]]:
    """Serialize a toolpath, omitting unset optional fields."""
    return [
        [{key: value for key, value in asdict(point).items() if value is not None} for point in level]
        for level in toolpath
    ]


def toolpath_from_dict(data: List[List[Dict[str, Any]]]) -> List[List[ToolpathPoint]]:
    """Rebuild a toolpath serialized by toolpath_to_dict (camelCase keys accepted)."""
    if not isinstance(data, list):
        raise ParseError("Toolpath must be a list of levels")

    toolpath = []
    for level_index, level in enumerate(data):
        if not isinstance(level, list):
            raise ParseError(f"Level {level_index} must be a list of points")
        points = []
        for point in level:
            values = _normalize_keys(point)
            try:
                points.append(ToolpathPoint(**values))
            except TypeError as e:
                raise ParseError(f"Invalid point in level {level_index}: {e}")
        toolpath.append(points)
    return toolpath
