"""Summary statistics for a planned facing toolpath."""
import math
from dataclasses import asdict, dataclass
from typing import Dict, List

from .models import ToolpathGenerationParams, ToolpathPoint
from .utils.arc_utils import calculate_arc_length
from .utils.multipass import calculate_z_levels

# Assumed G0 traverse rate (mm/min) for time estimates
DEFAULT_RAPID_RATE = 5000.0


@dataclass
class ToolpathStatistics:
    """Distances in mm, time in minutes, volume in cubic mm."""
    total_distance: float = 0.0
    cutting_distance: float = 0.0
    rapid_distance: float = 0.0
    estimated_time: float = 0.0
    material_removed: float = 0.0
    roughing_passes: int = 0
    finishing_pass: bool = False
    point_count: int = 0

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_move_length(prev: ToolpathPoint, point: ToolpathPoint) -> float:
    """
    Length of the move from prev to point.

    Arcs are measured along the arc; everything else is a straight line
    in XYZ.
    """
    if point.is_arc and point.i is not None and point.j is not None:
        center = (prev.x + point.i, prev.y + point.j)
        planar = calculate_arc_length(
            (prev.x, prev.y), (point.x, point.y), center, bool(point.clockwise)
        )
        return math.hypot(planar, point.z - prev.z)
    return math.dist((prev.x, prev.y, prev.z), (point.x, point.y, point.z))


def calculate_stock_area(params: ToolpathGenerationParams) -> float:
    stock = params.stock
    if stock.is_circular:
        return math.pi * (stock.size_x / 2) ** 2
    return stock.size_x * stock.size_y


def calculate_toolpath_statistics(
    toolpath: List[List[ToolpathPoint]],
    params: ToolpathGenerationParams,
    rapid_rate: float = DEFAULT_RAPID_RATE
) -> ToolpathStatistics:
    """
    Calculate distances, time estimate and removed volume for a toolpath.

    Feed moves are timed at their own feed rate, rapids at rapid_rate.
    Moves between levels are not counted.

    Args:
        toolpath: Levels in cutting order
        params: Parameters the toolpath was generated from
        rapid_rate: Rapid traverse rate (mm/min)

    Returns:
        ToolpathStatistics
    """
    stats = ToolpathStatistics()

    for level in toolpath:
        stats.point_count += len(level)
        for prev, point in zip(level, level[1:]):
            length = calculate_move_length(prev, point)
            if point.type == 'rapid':
                stats.rapid_distance += length
                if rapid_rate > 0:
                    stats.estimated_time += length / rapid_rate
            else:
                stats.cutting_distance += length
                if point.feed_rate > 0:
                    stats.estimated_time += length / point.feed_rate

    stats.total_distance = stats.cutting_distance + stats.rapid_distance

    z_levels = calculate_z_levels(params.cutting)[:len(toolpath)]
    stats.roughing_passes = sum(1 for level in z_levels if not level.is_finishing)
    stats.finishing_pass = any(level.is_finishing for level in z_levels)
    if z_levels:
        removed_depth = params.cutting.z_offset - z_levels[-1].depth
        stats.material_removed = calculate_stock_area(params) * removed_depth

    return stats
