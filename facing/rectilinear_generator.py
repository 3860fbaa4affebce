"""Rectilinear (row-by-row) facing pattern.

Every row is cut independently: rapid over the row start, plunge, cut
across, retract.
"""
from typing import List, Optional

from .models import GenerationOptions, ToolpathGenerationParams, ToolpathPoint
from .scan_rows import calculate_scan_rows
from .utils.multipass import calculate_z_levels
from .utils.normalizer import normalize_level_points


def generate_rectilinear_pattern(
    params: ToolpathGenerationParams,
    options: Optional[GenerationOptions] = None
) -> List[List[ToolpathPoint]]:
    """
    Generate a rectilinear facing toolpath.

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

    rows = calculate_scan_rows(params)
    z_levels = calculate_z_levels(cutting)
    options.debug(f"Rectilinear: {len(rows)} rows per level, {len(z_levels)} levels")

    all_levels = []
    for level_index, z_level in enumerate(z_levels):
        if options.aborted():
            return all_levels

        points = []
        for row_index, (start, end) in enumerate(rows):
            points.append(ToolpathPoint(x=start[0], y=start[1], z=safe_z, type='rapid'))
            points.append(ToolpathPoint(
                x=start[0], y=start[1], z=z_level.depth, feed_rate=feeds.z, type='linear'
            ))
            points.append(ToolpathPoint(
                x=end[0], y=end[1], z=z_level.depth, feed_rate=feeds.xy, type='linear',
                comment=f"Row {row_index + 1}"
            ))
            points.append(ToolpathPoint(x=end[0], y=end[1], z=safe_z, type='rapid'))

        all_levels.append(normalize_level_points(points, feeds))
        options.progress(
            (level_index + 1) / len(z_levels) * 100,
            f"Level {level_index + 1} of {len(z_levels)}"
        )

    return all_levels
