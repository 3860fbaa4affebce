"""Move-stream normalization.

The downstream motion representation never interpolates XY and Z together
on a repositioning move, so every such step is split in two.
"""
from typing import List, Optional

from ..models import FeedRates, ToolpathPoint
from .geometry import POSITION_TOLERANCE


def normalize_level_points(
    points: List[ToolpathPoint],
    feeds: Optional[FeedRates] = None
) -> List[ToolpathPoint]:
    """
    Split combined XY+Z rapid/linear moves into a planar and a vertical move.

    Descending: planar rapid at the prior depth, then a linear plunge.
    Ascending: vertical rapid to the new depth, then a planar rapid.
    Arcs are left alone.

    Args:
        points: Points of one level
        feeds: Feed rates; the plunge uses feeds.z when given

    Returns:
        New list of points
    """
    normalized: List[ToolpathPoint] = []
    for point in points:
        prev = normalized[-1] if normalized else None
        if prev is None or point.is_arc:
            normalized.append(point)
            continue

        planar_change = (
            abs(point.x - prev.x) > POSITION_TOLERANCE or
            abs(point.y - prev.y) > POSITION_TOLERANCE
        )
        depth_change = abs(point.z - prev.z) > POSITION_TOLERANCE

        if not (planar_change and depth_change):
            normalized.append(point)
        elif point.z > prev.z:
            normalized.append(ToolpathPoint(x=prev.x, y=prev.y, z=point.z, type='rapid'))
            normalized.append(ToolpathPoint(
                x=point.x, y=point.y, z=point.z, type='rapid', comment=point.comment
            ))
        else:
            plunge_feed = feeds.z if feeds else point.feed_rate
            normalized.append(ToolpathPoint(x=point.x, y=point.y, z=prev.z, type='rapid'))
            normalized.append(ToolpathPoint(
                x=point.x, y=point.y, z=point.z, feed_rate=plunge_feed,
                type='linear', comment=point.comment
            ))
    return normalized
