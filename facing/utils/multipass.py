"""Multi-level depth calculation utilities."""
import math
from typing import List

from ..models import CuttingParameters, ZLevel
from .geometry import POSITION_TOLERANCE


def calculate_num_passes(total_depth: float, pass_depth: float) -> int:
    """
    Calculate the number of levels needed to remove a given depth.

    Args:
        total_depth: Depth to remove
        pass_depth: Maximum depth per level

    Returns:
        Number of levels (0 when there is nothing to remove)
    """
    if total_depth <= 0:
        return 0
    if pass_depth <= 0:
        return 1
    # Slack keeps 1.1 / 0.1 from rounding up to an extra level
    return math.ceil(total_depth / pass_depth - POSITION_TOLERANCE)


def calculate_z_levels(cutting: CuttingParameters) -> List[ZLevel]:
    """
    Calculate the cutting depths for roughing and finishing levels.

    Roughing levels step down by cutting.stepdown; the last one may be a
    partial step so it lands exactly on the roughing depth. A finishing
    level at the full depth is appended when enabled.

    Args:
        cutting: Cutting parameters

    Returns:
        ZLevel list in cutting order
    """
    roughing_depth = cutting.total_depth
    if cutting.finishing_pass:
        roughing_depth = cutting.total_depth - cutting.finishing_pass_height

    levels = []
    for i in range(calculate_num_passes(roughing_depth, cutting.stepdown)):
        depth = cutting.z_offset - min((i + 1) * cutting.stepdown, roughing_depth)
        levels.append(ZLevel(depth=depth, is_finishing=False))

    if cutting.finishing_pass:
        levels.append(ZLevel(depth=cutting.z_offset - cutting.total_depth, is_finishing=True))

    return levels

