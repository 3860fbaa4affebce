"""
SVG Arc Calculation Module

Converts toolpath arc moves to SVG arc parameters.

A toolpath arc is defined by its start point (the previous point), its end
point, its center (start + I/J) and its direction. SVG needs a radius and
two flags instead of a center:

    A rx ry x-rotation large-arc-flag sweep-flag x y

Coordinate Systems and Y-Inversion:
    - Machine: Y-up
    - SVG: Y-down, so svg_y = (max_y - y) * scale + padding

Because only the coordinates are flipped, a CCW machine arc still looks
CCW on screen when drawn with sweep=0, and a CW arc with sweep=1.
"""

import math
from typing import Tuple


def calculate_arc_angular_span(
    start: Tuple[float, float],
    end: Tuple[float, float],
    center: Tuple[float, float],
    clockwise: bool
) -> float:
    """
    Calculate the angular span of an arc in degrees.

    Args:
        start: Arc start point
        end: Arc end point
        center: Arc center
        clockwise: True for CW, False for CCW (in the coordinate system of the points)

    Returns:
        Angular span in degrees (always positive, 0-360)
    """
    start_angle = math.atan2(start[1] - center[1], start[0] - center[0])
    end_angle = math.atan2(end[1] - center[1], end[0] - center[0])

    if clockwise:
        span = start_angle - end_angle
    else:
        span = end_angle - start_angle

    span_degrees = math.degrees(span)
    if span_degrees <= 0:
        span_degrees += 360

    return span_degrees


def calculate_svg_arc_flags(
    start: Tuple[float, float],
    end: Tuple[float, float],
    center: Tuple[float, float],
    clockwise: bool
) -> Tuple[int, int]:
    """
    Calculate SVG arc flags for a machine-coordinate arc.

    Returns:
        Tuple of (large_arc_flag, sweep_flag) for SVG arc command
    """
    span = calculate_arc_angular_span(start, end, center, clockwise)
    large_arc_flag = 1 if span > 180 else 0
    sweep_flag = 1 if clockwise else 0
    return large_arc_flag, sweep_flag


def cnc_to_svg_coords(
    x: float, y: float,
    min_x: float, max_y: float,
    scale: float = 1.0,
    padding: float = 0.0
) -> Tuple[float, float]:
    """
    Convert machine coordinates to SVG coordinates.

    Args:
        x, y: Machine coordinates (Y-up)
        min_x: Smallest X drawn (maps to the left padding)
        max_y: Largest Y drawn (maps to the top padding)
        scale: Pixels per unit
        padding: Padding around the drawing

    Returns:
        Tuple of (svg_x, svg_y) in SVG coordinates (Y-down)
    """
    svg_x = padding + (x - min_x) * scale
    svg_y = padding + (max_y - y) * scale
    return svg_x, svg_y


def generate_svg_arc_command(
    start: Tuple[float, float],
    end: Tuple[float, float],
    center: Tuple[float, float],
    clockwise: bool,
    min_x: float = 0.0,
    max_y: float = 0.0,
    scale: float = 1.0,
    padding: float = 0.0
) -> str:
    """
    Generate an SVG arc path command from a machine arc.

    Returns:
        SVG arc command string (e.g., "A 12.5000 12.5000 0 0 1 100.5000 200.3000")
    """
    svg_end_x, svg_end_y = cnc_to_svg_coords(end[0], end[1], min_x, max_y, scale, padding)
    radius = math.hypot(start[0] - center[0], start[1] - center[1]) * scale
    large_arc_flag, sweep_flag = calculate_svg_arc_flags(start, end, center, clockwise)

    return f"A {radius:.4f} {radius:.4f} 0 {large_arc_flag} {sweep_flag} {svg_end_x:.4f} {svg_end_y:.4f}"
