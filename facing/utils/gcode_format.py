"""G-code formatting utilities.

Positions are written with 4 decimals, feeds and spindle speeds with none.
Section builders return lists of lines; the program generator joins them.
"""
import re
from typing import List, Optional

from ..models import ToolpathGenerationParams


def format_coordinate(value: float, precision: int = 4) -> str:
    """
    Format a coordinate value with a fixed number of decimals.

    Args:
        value: The coordinate value
        precision: Number of decimal places (default 4)

    Returns:
        Formatted string representation
    """
    return f"{value:.{precision}f}"


def format_feed(value: float) -> str:
    """Feed rates and spindle speeds carry no decimals."""
    return format_coordinate(value, 0)


def generate_rapid_move(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None
) -> str:
    """
    Generate a G0 rapid move command.

    Args:
        x: X coordinate (optional)
        y: Y coordinate (optional)
        z: Z coordinate (optional)

    Returns:
        G0 command string
    """
    parts = ["G0"]
    if x is not None:
        parts.append(f"X{format_coordinate(x)}")
    if y is not None:
        parts.append(f"Y{format_coordinate(y)}")
    if z is not None:
        parts.append(f"Z{format_coordinate(z)}")
    return " ".join(parts)


def generate_linear_move(
    x: float,
    y: float,
    z: float,
    feed: Optional[float] = None
) -> str:
    """
    Generate a G1 linear move command.

    Args:
        x: X coordinate
        y: Y coordinate
        z: Z coordinate
        feed: Feed rate (optional, omitted when unchanged)

    Returns:
        G1 command string
    """
    parts = [
        "G1",
        f"X{format_coordinate(x)}",
        f"Y{format_coordinate(y)}",
        f"Z{format_coordinate(z)}"
    ]
    if feed is not None:
        parts.append(f"F{format_feed(feed)}")
    return " ".join(parts)


def generate_arc_move(
    clockwise: bool,
    x: float,
    y: float,
    z: float,
    i: Optional[float] = None,
    j: Optional[float] = None,
    feed: Optional[float] = None
) -> str:
    """
    Generate a G2/G3 arc move command.

    Args:
        clockwise: True for G2, False for G3
        x: Destination X coordinate
        y: Destination Y coordinate
        z: Destination Z coordinate
        i: I offset (X distance from the arc start to its center)
        j: J offset (Y distance from the arc start to its center)
        feed: Feed rate (optional, omitted when unchanged)

    Returns:
        Arc command string
    """
    parts = [
        "G2" if clockwise else "G3",
        f"X{format_coordinate(x)}",
        f"Y{format_coordinate(y)}",
        f"Z{format_coordinate(z)}"
    ]
    if i is not None:
        parts.append(f"I{format_coordinate(i)}")
    if j is not None:
        parts.append(f"J{format_coordinate(j)}")
    if feed is not None:
        parts.append(f"F{format_feed(feed)}")
    return " ".join(parts)


def generate_header(params: ToolpathGenerationParams, tool_number: int) -> List[str]:
    """
    Generate the descriptive comment header and modal setup lines.

    Args:
        params: Generation parameters
        tool_number: Tool in the spindle

    Returns:
        List of header lines
    """
    stock = params.stock
    pattern = params.pattern
    feeds = params.feeds

    if stock.is_circular:
        stock_line = f"; Stock: Circular D{format_coordinate(stock.size_x)}mm"
    else:
        stock_line = (f"; Stock: Rectangular {format_coordinate(stock.size_x)}"
                      f"x{format_coordinate(stock.size_y)}mm")

    return [
        "; Stock Preparation - Generated Facing Operation",
        stock_line,
        f"; Pattern: {pattern.type} at {pattern.angle:g}°",
        f"; Tool: T{tool_number} R{format_coordinate(params.cutting.tool_radius)}mm",
        f"; Feed: XY={format_feed(feeds.xy)} Z={format_feed(feeds.z)} mm/min",
        f"; Spindle: {format_feed(feeds.spindle_speed)} RPM",
        "",
        "G21 ; Metric units",
        "G90 ; Absolute positioning",
        "G94 ; Feed rate per minute",
        "",
    ]


def generate_stock_metadata(params: ToolpathGenerationParams) -> List[str]:
    """
    Generate the M7500 key/value record describing the stock for viewers.

    The Z value is the total depth removed.
    """
    stock = params.stock
    z = format_coordinate(params.cutting.total_depth)
    if stock.is_circular:
        record = f'M7500 K"stock_cylinder" V"D{format_coordinate(stock.size_x)}:Z{z}"'
    else:
        record = (f'M7500 K"stock_cuboid" V"X{format_coordinate(stock.size_x)}'
                  f':Y{format_coordinate(stock.size_y)}:Z{z}"')
    return ["; Stock metadata for G-code viewer", record, ""]


def generate_setup(tool_number: int, spindle_speed: float, workplace: int) -> List[str]:
    """
    Generate work coordinate selection, tool confirmation and spindle start.

    Args:
        tool_number: Tool in the spindle
        spindle_speed: Spindle RPM
        workplace: 1-based work coordinate index (1 -> G54)

    Returns:
        List of setup lines
    """
    return [
        "; Setup",
        f"G{53 + workplace} ; Use WCS {workplace}",
        f"T{tool_number} ; Confirm tool selection",
        f"M3.9 S{format_feed(spindle_speed)} ; Start spindle with safety wrapper",
        "",
    ]


def generate_positioning(x: float, y: float, safe_z: float) -> List[str]:
    """Retract to the safe plane, then rapid over the first point."""
    return [
        "; Position to start",
        f"{generate_rapid_move(z=safe_z)} ; Move to safe height above stock top",
        f"{generate_rapid_move(x=x, y=y)} ; Rapid to start position",
        "",
    ]


def generate_footer(safe_z: float) -> List[str]:
    """
    Generate the cleanup block.

    Args:
        safe_z: Absolute Z of the retract plane

    Returns:
        List of footer lines
    """
    return [
        "; Cleanup",
        f"{generate_rapid_move(z=safe_z)} ; Final retract to safe height above stock top",
        "M5.9 ; Stop spindle with safety wrapper",
        "G27 Z1 ; Park machine",
        "; Program ends automatically at end of file",
    ]


def sanitize_program_name(name: str) -> str:
    """
    Clean a program name for filesystem use.

    - Replace spaces with underscores
    - Remove special characters except underscores and hyphens
    - Truncate to 50 characters max

    Args:
        name: Original program name

    Returns:
        Sanitized name safe for filesystem
    """
    sanitized = name.replace(" ", "_")
    sanitized = re.sub(r'[^a-zA-Z0-9_-]', '', sanitized)
    return sanitized[:50]
