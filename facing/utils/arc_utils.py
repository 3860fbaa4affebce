"""Arc direction and offset calculation utilities."""
import math
from typing import Tuple

from .geometry import POSITION_TOLERANCE


def milling_sign(milling_direction: str) -> int:
    """
    Angular travel sign for a milling direction.

    Returns:
        1 (counter-clockwise) for climb, -1 (clockwise) for conventional
    """
    return 1 if milling_direction == 'climb' else -1


def is_clockwise_arc(
    current: Tuple[float, float],
    destination: Tuple[float, float],
    center: Tuple[float, float]
) -> bool:
    """
    Determine the rotation sense of the shorter arc between two points.

    Uses the 2D cross product of center->current and center->destination.

    Args:
        current: Current position (x, y)
        destination: Destination position (x, y)
        center: Arc center (x, y)

    Returns:
        True if the short way round is clockwise
    """
    cx, cy = current
    dx, dy = destination
    ax, ay = center

    cross = (cx - ax) * (dy - ay) - (cy - ay) * (dx - ax)
    return cross <= 0


def calculate_ij_offsets(
    current: Tuple[float, float],
    center: Tuple[float, float]
) -> Tuple[float, float]:
    """
    Calculate I, J offsets for arc commands.

    I and J are the offsets from the current position to the arc center.

    Args:
        current: Current position (x, y)
        center: Arc center (x, y)

    Returns:
        Tuple of (I, J) offsets
    """
    cx, cy = current
    ax, ay = center

    i = ax - cx
    j = ay - cy

    return (i, j)


def calculate_arc_sweep(
    start: Tuple[float, float],
    end: Tuple[float, float],
    center: Tuple[float, float],
    clockwise: bool
) -> float:
    """
    Signed angular sweep of an arc in radians.

    Coincident start and end points are treated as a full circle.

    Returns:
        Negative sweep for clockwise arcs, positive for counter-clockwise
    """
    start_angle = math.atan2(start[1] - center[1], start[0] - center[0])
    end_angle = math.atan2(end[1] - center[1], end[0] - center[0])
    sweep = end_angle - start_angle

    if clockwise:
        if sweep >= -POSITION_TOLERANCE:
            sweep -= 2 * math.pi
    elif sweep <= POSITION_TOLERANCE:
        sweep += 2 * math.pi
    return sweep


def calculate_arc_length(
    start: Tuple[float, float],
    end: Tuple[float, float],
    center: Tuple[float, float],
    clockwise: bool
) -> float:
    """Length of an arc from start to end about center."""
    radius = math.hypot(start[0] - center[0], start[1] - center[1])
    return abs(calculate_arc_sweep(start, end, center, clockwise)) * radius
