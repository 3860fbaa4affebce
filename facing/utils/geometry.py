"""Planar geometry helpers for facing toolpaths.

All points are (x, y) tuples. Comparisons against boundaries go through
the two tolerances below so that a point is never classified inside on one
call and outside on the next.
"""
import math
from typing import List, Optional, Tuple

Point2D = Tuple[float, float]
Box = Tuple[float, float, float, float]  # (x_min, y_min, x_max, y_max)

# Two positions closer than this are the same position
POSITION_TOLERANCE = 1e-6

# Extra distance the tool clears past a stock edge
BOUNDARY_CLEARANCE = 1.0


def calculate_effective_cutting_width(tool_radius: float, stepover: float) -> float:
    """
    Calculate the lateral distance between adjacent passes.

    Args:
        tool_radius: Tool radius
        stepover: Stepover as a percentage of tool diameter

    Returns:
        Effective cutting width
    """
    tool_diameter = tool_radius * 2
    return tool_diameter * (stepover / 100)


def calculate_number_of_passes(stock_dimension: float, effective_width: float) -> int:
    """
    Calculate the number of passes needed to cover a dimension.

    Args:
        stock_dimension: Dimension to cover
        effective_width: Effective cutting width

    Returns:
        Number of passes (at least 1)
    """
    if effective_width <= 0 or stock_dimension <= 0:
        return 1
    return max(1, math.ceil(stock_dimension / effective_width))


def calculate_origin_offset(stock_x: float, stock_y: float, origin_position: str) -> Point2D:
    """
    Offset of the stock's front-left corner from program zero.

    The origin code is '<front|center|back>-<left|center|right>'.
    'front-left' puts program zero on the front-left corner (offset 0, 0).

    Raises:
        ValueError: If either anchor is not recognized
    """
    try:
        y_pos, x_pos = origin_position.split('-')
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid origin position: {origin_position!r}")

    x_offsets = {'left': 0.0, 'center': -stock_x / 2, 'right': -stock_x}
    y_offsets = {'front': 0.0, 'center': -stock_y / 2, 'back': -stock_y}

    if x_pos not in x_offsets or y_pos not in y_offsets:
        raise ValueError(f"Invalid origin position: {origin_position!r}")

    return x_offsets[x_pos], y_offsets[y_pos]


def distance(a: Point2D, b: Point2D) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def rotate_point(point: Point2D, center: Point2D, angle_degrees: float) -> Point2D:
    """
    Rotate a point counter-clockwise about a center.

    A whole number of turns returns the input point unchanged, without
    trigonometric round-off.
    """
    if angle_degrees % 360 == 0:
        return point

    angle = math.radians(angle_degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return (
        center[0] + dx * cos_a - dy * sin_a,
        center[1] + dx * sin_a + dy * cos_a
    )


def intersect_segment_circle(
    p1: Point2D,
    p2: Point2D,
    center: Point2D,
    radius: float
) -> Optional[Point2D]:
    """
    Find where a segment first crosses a circle, walking from p1 to p2.

    Args:
        p1: Segment start
        p2: Segment end
        center: Circle center
        radius: Circle radius

    Returns:
        The intersection closest to p1, or None if the segment does not
        touch the circle
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    fx = p1[0] - center[0]
    fy = p1[1] - center[1]

    a = dx * dx + dy * dy
    if a < POSITION_TOLERANCE * POSITION_TOLERANCE:
        return None

    b = 2 * (dx * fx + dy * fy)
    c = fx * fx + fy * fy - radius * radius
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return None

    sqrt_disc = math.sqrt(discriminant)
    t_tolerance = POSITION_TOLERANCE / math.sqrt(a)
    for t in ((-b - sqrt_disc) / (2 * a), (-b + sqrt_disc) / (2 * a)):
        if -t_tolerance <= t <= 1 + t_tolerance:
            t = min(max(t, 0.0), 1.0)
            return p1[0] + t * dx, p1[1] + t * dy

    return None


def clip_segment_to_circle(
    p1: Point2D,
    p2: Point2D,
    center: Point2D,
    radius: float
) -> Optional[Tuple[Point2D, Point2D]]:
    """
    Clip a segment to the inside of a circle.

    Returns:
        (start, end) of the part inside the circle, the input unchanged if
        it is fully inside, or None if no part of it is inside
    """
    p1_inside = distance(p1, center) <= radius + POSITION_TOLERANCE
    p2_inside = distance(p2, center) <= radius + POSITION_TOLERANCE

    if p1_inside and p2_inside:
        return p1, p2

    if p1_inside:
        exit_point = intersect_segment_circle(p2, p1, center, radius)
        return (p1, exit_point) if exit_point else None

    if p2_inside:
        entry_point = intersect_segment_circle(p1, p2, center, radius)
        return (entry_point, p2) if entry_point else None

    entry_point = intersect_segment_circle(p1, p2, center, radius)
    if entry_point is None:
        return None
    exit_point = intersect_segment_circle(p2, p1, center, radius)
    if exit_point is None or distance(entry_point, exit_point) <= POSITION_TOLERANCE:
        # Tangent
        return None
    return entry_point, exit_point


def clip_segment_to_box(p1: Point2D, p2: Point2D, box: Box) -> Optional[Tuple[Point2D, Point2D]]:
    """
    Clip a segment to an axis-aligned box (Liang-Barsky).

    Args:
        p1: Segment start
        p2: Segment end
        box: (x_min, y_min, x_max, y_max)

    Returns:
        (start, end) of the clipped segment, or None if it lies entirely
        outside. A segment fully inside comes back unchanged.
    """
    x_min, y_min, x_max, y_max = box
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    t0, t1 = 0.0, 1.0

    p = (-dx, dx, -dy, dy)
    q = (p1[0] - x_min, x_max - p1[0], p1[1] - y_min, y_max - p1[1])

    for pk, qk in zip(p, q):
        if pk == 0:
            # Parallel to this edge
            if qk < 0:
                return None
            continue
        r = qk / pk
        if pk < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    start = p1 if t0 == 0 else (p1[0] + t0 * dx, p1[1] + t0 * dy)
    end = p2 if t1 == 1 else (p1[0] + t1 * dx, p1[1] + t1 * dy)
    return start, end


def get_line_intersection(
    radius: float,
    line_value: float,
    is_horizontal: bool,
    center: Point2D,
    positive_root: bool
) -> Optional[Point2D]:
    """
    Intersect a circle about center with an axis-parallel line.

    Args:
        radius: Circle radius
        line_value: Y of a horizontal line, or X of a vertical line
        is_horizontal: True for y = line_value, False for x = line_value
        center: Circle center
        positive_root: Pick the root on the positive side of the center

    Returns:
        Intersection point, or None if the line misses the circle
    """
    sign = 1 if positive_root else -1
    r_sq = radius * radius
    if is_horizontal:
        dy = line_value - center[1]
        if dy * dy > r_sq:
            return None
        return center[0] + sign * math.sqrt(r_sq - dy * dy), line_value

    dx = line_value - center[0]
    if dx * dx > r_sq:
        return None
    return line_value, center[1] + sign * math.sqrt(r_sq - dx * dx)


def calculate_dog_leg_move(from_point: Point2D, to_point: Point2D, center: Point2D) -> List[Point2D]:
    """
    Build an L-shaped move between two points.

    The knee is whichever of the two axis-aligned corners lies farther from
    the working center, so the move stays out in already-cleared material.

    Returns:
        One or two points ending at to_point
    """
    knee_a = (from_point[0], to_point[1])
    knee_b = (to_point[0], from_point[1])
    knee = knee_a if distance(knee_a, center) > distance(knee_b, center) else knee_b

    moves = []
    if distance(knee, from_point) > POSITION_TOLERANCE:
        moves.append(knee)
    if distance(to_point, knee) > POSITION_TOLERANCE:
        moves.append(to_point)
    return moves or [to_point]
