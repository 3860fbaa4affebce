"""Parameter and toolpath validation utilities."""
import math
from dataclasses import dataclass
from typing import List, Optional

from ..models import (
    MILLING_DIRECTIONS,
    PATTERN_TYPES,
    SPIRAL_DIRECTIONS,
    STOCK_SHAPES,
    ToolpathGenerationParams,
    ToolpathPoint,
)
from .geometry import POSITION_TOLERANCE, calculate_origin_offset

MIN_SPIRAL_SEGMENTS = 3


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def validate_generation_params(params: ToolpathGenerationParams) -> List[str]:
    """
    Validate generation parameters before a toolpath is planned.

    Never raises; an empty list means the parameters are usable.

    Args:
        params: Generation parameters

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    stock = params.stock
    cutting = params.cutting
    pattern = params.pattern
    feeds = params.feeds

    if cutting.tool_radius <= 0:
        errors.append("Tool radius must be positive")

    if stock.shape not in STOCK_SHAPES:
        errors.append(f"Unknown stock shape: {stock.shape}")
    elif stock.is_circular:
        if not _positive(stock.diameter):
            errors.append("Stock diameter must be positive")
        elif cutting.tool_radius >= stock.diameter / 2:
            errors.append("Tool radius exceeds stock radius")
    else:
        if not _positive(stock.width):
            errors.append("Stock X dimension must be positive")
        elif cutting.tool_radius >= stock.width / 2:
            errors.append("Tool radius exceeds half of stock X dimension")
        if not _positive(stock.depth):
            errors.append("Stock Y dimension must be positive")
        elif cutting.tool_radius >= stock.depth / 2:
            errors.append("Tool radius exceeds half of stock Y dimension")

    try:
        calculate_origin_offset(stock.size_x, stock.size_y, stock.origin_position)
    except ValueError as e:
        errors.append(str(e))

    if cutting.stepover <= 0 or cutting.stepover > 100:
        errors.append("Stepover must be between 0 and 100%")
    if cutting.stepdown <= 0:
        errors.append("Stepdown must be positive")
    if cutting.total_depth <= 0:
        errors.append("Total depth must be positive")
    if cutting.safe_z_height <= 0:
        errors.append("Safe Z height must be positive")

    if cutting.finishing_pass:
        if cutting.finishing_pass_height <= 0:
            errors.append("Finishing pass height must be positive")
        if cutting.finishing_pass_height >= cutting.total_depth:
            errors.append("Finishing pass height must be less than total depth")
        if cutting.finishing_pass_height >= cutting.stepdown:
            errors.append("Finishing pass height should be less than stepdown value")

    if feeds.xy <= 0:
        errors.append("Horizontal feed rate must be positive")
    if feeds.z <= 0:
        errors.append("Vertical feed rate must be positive")
    if feeds.spindle_speed <= 0:
        errors.append("Spindle speed must be positive")

    if pattern.type not in PATTERN_TYPES:
        errors.append(f"Unsupported facing pattern: {pattern.type}")
    if pattern.milling_direction not in MILLING_DIRECTIONS:
        errors.append(f"Unknown milling direction: {pattern.milling_direction}")
    if pattern.spiral_direction not in SPIRAL_DIRECTIONS:
        errors.append(f"Unknown spiral direction: {pattern.spiral_direction}")
    if pattern.spiral_segments_per_revolution < MIN_SPIRAL_SEGMENTS:
        errors.append(f"Spiral segments per revolution must be at least {MIN_SPIRAL_SEGMENTS}")

    return errors


def validate_stepdown(
    stepdown: float,
    tool_diameter: float,
    max_stepdown_factor: float = 0.5
) -> List[str]:
    """
    Check the stepdown against the tool diameter.

    Deep stepdowns break end mills. Facing still generates; these are
    advisory only.

    Args:
        stepdown: Depth per roughing level (mm)
        tool_diameter: Tool diameter (mm)
        max_stepdown_factor: Recommended maximum ratio of stepdown to diameter

    Returns:
        List of warning messages
    """
    warnings = []

    if stepdown <= 0 or tool_diameter <= 0:
        return warnings

    ratio = stepdown / tool_diameter

    if ratio > 1.0:
        warnings.append(
            f"Stepdown ({stepdown:.4f}mm) exceeds tool diameter ({tool_diameter:.4f}mm). "
            f"This will almost certainly break the end mill. Reduce stepdown."
        )
    elif ratio > max_stepdown_factor:
        warnings.append(
            f"Stepdown ({stepdown:.4f}mm) is {ratio * 100:.0f}% of tool diameter ({tool_diameter:.4f}mm). "
            f"Recommended maximum is {max_stepdown_factor * 100:.0f}%."
        )

    return warnings


def validate_feed_rates(xy_feed: float, z_feed: float) -> List[str]:
    """
    Validate plunge feed against horizontal feed.

    Args:
        xy_feed: Horizontal feed rate (mm/min)
        z_feed: Plunge feed rate (mm/min)

    Returns:
        List of warning messages
    """
    warnings = []

    if z_feed > xy_feed:
        warnings.append(
            f"Plunge rate ({z_feed:g} mm/min) exceeds feed rate ({xy_feed:g} mm/min). "
            f"Verify this is intentional for your material and tool."
        )

    return warnings


def get_parameter_warnings(params: ToolpathGenerationParams) -> List[str]:
    """Non-blocking warnings for a parameter set."""
    warnings = validate_stepdown(params.cutting.stepdown, params.cutting.tool_diameter)
    warnings.extend(validate_feed_rates(params.feeds.xy, params.feeds.z))
    return warnings


def validate_arc_geometry(
    level: List[ToolpathPoint],
    tolerance: float = 0.001
) -> List[str]:
    """
    Validate arc geometry in one level.

    Checks that each arc's end point is as far from its center as the
    point before it. The center is the previous point plus (I, J).

    Args:
        level: Points of one level
        tolerance: Maximum allowed difference in radii (mm)

    Returns:
        List of warning messages for invalid arcs (empty if all valid)
    """
    warnings = []

    for index, point in enumerate(level):
        if not point.is_arc:
            continue

        if index == 0:
            warnings.append(f"Arc at point {index}: arc cannot be the first point in a level")
            continue
        if point.i is None or point.j is None:
            warnings.append(f"Arc at point {index} is missing I/J offsets")
            continue

        start = level[index - 1]
        center_x = start.x + point.i
        center_y = start.y + point.j
        start_radius = math.hypot(start.x - center_x, start.y - center_y)
        end_radius = math.hypot(point.x - center_x, point.y - center_y)

        radius_diff = abs(start_radius - end_radius)
        if radius_diff > tolerance:
            warnings.append(
                f"Arc from ({start.x:.4f}, {start.y:.4f}) to ({point.x:.4f}, {point.y:.4f}) "
                f"has invalid geometry: start is {start_radius:.4f}mm from center "
                f"({center_x:.4f}, {center_y:.4f}), but end is {end_radius:.4f}mm. "
                f"Difference of {radius_diff:.4f}mm exceeds tolerance of {tolerance}mm."
            )

    return warnings


@dataclass
class MoveIssue:
    """A suspicious transition between two consecutive points."""
    level: int
    index: int
    prev: Optional[ToolpathPoint]
    curr: ToolpathPoint


def _planar_change(a: ToolpathPoint, b: ToolpathPoint) -> bool:
    return abs(a.x - b.x) > POSITION_TOLERANCE or abs(a.y - b.y) > POSITION_TOLERANCE


def _depth_change(a: ToolpathPoint, b: ToolpathPoint) -> bool:
    return abs(a.z - b.z) > POSITION_TOLERANCE


def detect_combined_xyz_moves(toolpath: List[List[ToolpathPoint]]) -> List[MoveIssue]:
    """Rapid or linear moves that change XY and Z at once."""
    issues = []
    for level_index, level in enumerate(toolpath):
        for index in range(1, len(level)):
            prev, curr = level[index - 1], level[index]
            if not curr.is_arc and _planar_change(prev, curr) and _depth_change(prev, curr):
                issues.append(MoveIssue(level_index, index, prev, curr))
    return issues


def detect_vertical_linear_retracts(toolpath: List[List[ToolpathPoint]]) -> List[MoveIssue]:
    """Straight-up moves cut at feed instead of rapid."""
    issues = []
    for level_index, level in enumerate(toolpath):
        for index in range(1, len(level)):
            prev, curr = level[index - 1], level[index]
            if (curr.type == 'linear' and not _planar_change(prev, curr) and
                    curr.z > prev.z + POSITION_TOLERANCE):
                issues.append(MoveIssue(level_index, index, prev, curr))
    return issues


def detect_xy_linear_at_safe_z(
    toolpath: List[List[ToolpathPoint]],
    safe_z: float
) -> List[MoveIssue]:
    """Feed moves across the safe plane that should be rapids."""
    issues = []
    threshold = safe_z - POSITION_TOLERANCE
    for level_index, level in enumerate(toolpath):
        for index in range(1, len(level)):
            prev, curr = level[index - 1], level[index]
            if (curr.type == 'linear' and _planar_change(prev, curr) and
                    prev.z >= threshold and curr.z >= threshold):
                issues.append(MoveIssue(level_index, index, prev, curr))
    return issues
