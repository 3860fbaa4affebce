"""Zigzag facing pattern.

One continuous path per level: plunge once, then cut each row and step
over to the next without lifting. On circular stock the step-over follows
the compensated boundary circle.
"""
from typing import List, Optional

from .models import GenerationOptions, ToolpathGenerationParams, ToolpathPoint
from .scan_rows import ScanEnvelope, calculate_scan_envelope, calculate_scan_rows
from .utils.arc_utils import calculate_ij_offsets, is_clockwise_arc
from .utils.geometry import POSITION_TOLERANCE, Point2D, distance
from .utils.multipass import calculate_z_levels
from .utils.normalizer import normalize_level_points


def _on_boundary(point: Point2D, envelope: ScanEnvelope) -> bool:
    # Loose tolerance: clip points are solved from a quadratic
    return abs(distance(point, envelope.center) - envelope.radius) <= 1e3 * POSITION_TOLERANCE


def _step_over(
    prev: Point2D,
    target: Point2D,
    depth: float,
    feed: float,
    envelope: ScanEnvelope
) -> ToolpathPoint:
    """Move from the end of one row to the start of the next."""
    if envelope.is_circular and _on_boundary(prev, envelope) and _on_boundary(target, envelope):
        i, j = calculate_ij_offsets(prev, envelope.center)
        return ToolpathPoint(
            x=target[0], y=target[1], z=depth, feed_rate=feed, type='arc',
            i=i, j=j, clockwise=is_clockwise_arc(prev, target, envelope.center),
            comment='Boundary step-over'
        )
    return ToolpathPoint(
        x=target[0], y=target[1], z=depth, feed_rate=feed, type='linear', comment='Step-over'
    )


def generate_zigzag_pattern(
    params: ToolpathGenerationParams,
    options: Optional[GenerationOptions] = None
) -> List[List[ToolpathPoint]]:
    """
    Generate a zigzag facing toolpath.

    Args:
        params: Generation parameters
        options: Abort/progress/debug hooks

    Returns:
        One list of points per depth level
    """
    options = options or GenerationOptions()
    cutting = params.cutting
    feeds = params.feeds
    safe_z = cutting.retract_height

    envelope = calculate_scan_envelope(params)
    rows = calculate_scan_rows(params)
    z_levels = calculate_z_levels(cutting)
    options.debug(f"Zigzag: {len(rows)} rows per level, {len(z_levels)} levels")

    all_levels = []
    for level_index, z_level in enumerate(z_levels):
        if options.aborted():
            return all_levels

        depth = z_level.depth
        points = []
        if rows:
            first = rows[0][0]
            points.append(ToolpathPoint(x=first[0], y=first[1], z=safe_z, type='rapid'))
            points.append(ToolpathPoint(
                x=first[0], y=first[1], z=depth, feed_rate=feeds.z, type='linear'
            ))

            prev_end = None
            for row_index, (start, end) in enumerate(rows):
                if prev_end is not None:
                    points.append(_step_over(prev_end, start, depth, feeds.xy, envelope))
                points.append(ToolpathPoint(
                    x=end[0], y=end[1], z=depth, feed_rate=feeds.xy, type='linear',
                    comment=f"Row {row_index + 1}"
                ))
                prev_end = end

            points.append(ToolpathPoint(x=prev_end[0], y=prev_end[1], z=safe_z, type='rapid'))

        all_levels.append(normalize_level_points(points, feeds))
        options.progress(
            (level_index + 1) / len(z_levels) * 100,
            f"Level {level_index + 1} of {len(z_levels)}"
        )

    return all_levels
