"""Scan-row layout shared by the rectilinear and zigzag generators.

Rows run along the X axis rotated by the pattern angle about the stock
center. Each row is laid out as a long line through the stock and clipped
to the tool-compensated envelope: a box for rectangular stock, a circle for
circular stock.

Without clear_stock_exit on rectangular stock a row is clipped to the
stock outline and then pulled back a tool radius at each end, so rotated
rows that only catch a stock corner still cut it.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import ToolpathGenerationParams
from .utils.geometry import (
    BOUNDARY_CLEARANCE,
    POSITION_TOLERANCE,
    Point2D,
    calculate_effective_cutting_width,
    calculate_number_of_passes,
    calculate_origin_offset,
    clip_segment_to_box,
    clip_segment_to_circle,
    distance,
    rotate_point,
)

# Shortest row kept when pulling row ends back from the stock outline
MIN_ROW_LENGTH = 1.0


@dataclass
class ScanEnvelope:
    """Region the tool center may travel in while cutting rows."""
    center: Point2D
    box: Optional[Tuple[float, float, float, float]] = None
    radius: Optional[float] = None
    end_inset: float = 0.0  # pulled back from each end of a clipped row

    @property
    def is_circular(self) -> bool:
        return self.radius is not None

    def clip(self, start: Point2D, end: Point2D) -> Optional[Tuple[Point2D, Point2D]]:
        if self.is_circular:
            return clip_segment_to_circle(start, end, self.center, self.radius)
        clipped = clip_segment_to_box(start, end, self.box)
        if clipped is None or self.end_inset <= 0:
            return clipped
        return inset_segment(*clipped, self.end_inset)


def inset_segment(start: Point2D, end: Point2D, inset: float) -> Optional[Tuple[Point2D, Point2D]]:
    """
    Pull both ends of a segment towards its middle.

    Segments too short for the full inset keep MIN_ROW_LENGTH (or their
    whole length when shorter than that).
    """
    length = distance(start, end)
    if length <= POSITION_TOLERANCE:
        return None
    trim = min(inset, max((length - MIN_ROW_LENGTH) / 2, 0.0))
    ux = (end[0] - start[0]) / length
    uy = (end[1] - start[1]) / length
    return (
        (start[0] + ux * trim, start[1] + uy * trim),
        (end[0] - ux * trim, end[1] - uy * trim),
    )


def calculate_stock_center(params: ToolpathGenerationParams) -> Point2D:
    """Center of the stock in program coordinates."""
    stock = params.stock
    offset_x, offset_y = calculate_origin_offset(stock.size_x, stock.size_y, stock.origin_position)
    return offset_x + stock.size_x / 2, offset_y + stock.size_y / 2


def calculate_scan_envelope(params: ToolpathGenerationParams) -> ScanEnvelope:
    """
    Build the tool-compensated envelope for row cutting.

    With clear_stock_exit the tool center runs a full radius plus clearance
    past the stock outline; otherwise rows stop a tool radius short of the
    outline along the row.
    """
    stock = params.stock
    cutting = params.cutting
    center = calculate_stock_center(params)
    r = cutting.tool_radius

    if stock.is_circular:
        stock_radius = stock.diameter / 2
        if cutting.clear_stock_exit:
            radius = stock_radius + r + BOUNDARY_CLEARANCE
        else:
            radius = stock_radius - r
        return ScanEnvelope(center=center, radius=radius)

    grow = r + BOUNDARY_CLEARANCE if cutting.clear_stock_exit else 0.0
    half_x = stock.size_x / 2 + grow + POSITION_TOLERANCE
    half_y = stock.size_y / 2 + grow + POSITION_TOLERANCE
    box = (center[0] - half_x, center[1] - half_y, center[0] + half_x, center[1] + half_y)
    end_inset = 0.0 if cutting.clear_stock_exit else r
    return ScanEnvelope(center=center, box=box, end_inset=end_inset)


def calculate_scan_dimension(params: ToolpathGenerationParams) -> float:
    """Extent of the stock measured across the rows."""
    stock = params.stock
    if stock.is_circular:
        return stock.diameter
    angle = math.radians(params.pattern.angle)
    return stock.size_x * abs(math.sin(angle)) + stock.size_y * abs(math.cos(angle))


def calculate_scan_rows(params: ToolpathGenerationParams) -> List[Tuple[Point2D, Point2D]]:
    """
    Lay out the cutting rows for one level.

    Rows are spread evenly across the scan dimension, first and last row
    keeping the tool edge on the stock edge. Row count is
    max(1, ceil(scan_dimension / effective_width)); rows that miss the
    envelope entirely are dropped. Consecutive rows run in opposite
    directions.

    Returns:
        List of (start, end) points in cutting order
    """
    cutting = params.cutting
    envelope = calculate_scan_envelope(params)
    center = envelope.center

    effective_width = calculate_effective_cutting_width(cutting.tool_radius, cutting.stepover)
    scan_dimension = calculate_scan_dimension(params)
    num_rows = calculate_number_of_passes(scan_dimension, effective_width)

    half_span = max(scan_dimension / 2 - cutting.tool_radius, 0.0)
    spacing = 2 * half_span / (num_rows - 1) if num_rows > 1 else 0.0
    reach = math.hypot(params.stock.size_x, params.stock.size_y) + 2 * (
        cutting.tool_radius + BOUNDARY_CLEARANCE
    )

    rows = []
    for i in range(num_rows):
        offset = -half_span + i * spacing if num_rows > 1 else 0.0
        start = rotate_point((center[0] - reach, center[1] + offset), center, params.pattern.angle)
        end = rotate_point((center[0] + reach, center[1] + offset), center, params.pattern.angle)

        clipped = envelope.clip(start, end)
        if clipped is None or distance(*clipped) <= POSITION_TOLERANCE:
            continue

        row_start, row_end = clipped
        if len(rows) % 2 == 1:
            row_start, row_end = row_end, row_start
        rows.append((row_start, row_end))

    return rows
