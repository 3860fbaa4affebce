"""G-code generation for facing toolpaths.

Turns the per-level point lists produced by the toolpath generators into a
program with:
- Descriptive header and modal setup (G21/G90/G94)
- Stock metadata record for viewers
- Work coordinate, tool and spindle setup
- One cutting section per depth level
- Retract, spindle stop and park
"""
from typing import List, Optional

from .models import ToolpathGenerationParams, ToolpathPoint, ZLevel
from .utils.gcode_format import (
    format_coordinate,
    generate_arc_move,
    generate_footer,
    generate_header,
    generate_linear_move,
    generate_positioning,
    generate_rapid_move,
    generate_setup,
    generate_stock_metadata,
)
from .utils.multipass import calculate_z_levels


class FacingGCodeGenerator:
    """G-code generator for a planned facing toolpath."""

    def __init__(
        self,
        params: ToolpathGenerationParams,
        tool_number: int = 0,
        workplace: int = 1
    ):
        """
        Initialize the generator.

        Args:
            params: Parameters the toolpath was generated from
            tool_number: Tool in the spindle
            workplace: 1-based work coordinate index (1 -> G54)
        """
        self.params = params
        self.tool_number = tool_number
        self.workplace = workplace
        self.z_levels = calculate_z_levels(params.cutting)

    def _level_info(self, level_index: int, points: List[ToolpathPoint]) -> ZLevel:
        if level_index < len(self.z_levels):
            return self.z_levels[level_index]
        # Toolpath planned with other parameters; treat extra levels as roughing
        return ZLevel(depth=min(p.z for p in points), is_finishing=False)

    def _generate_level(self, level_index: int, points: List[ToolpathPoint]) -> List[str]:
        """
        Generate the cutting section for one level.

        The feed word is only written when the feed or the motion command
        changes; a rapid resets feed tracking.

        Args:
            level_index: Zero-indexed level number
            points: Normalized points of the level

        Returns:
            List of G-code lines
        """
        cutting = self.params.cutting
        z_level = self._level_info(level_index, points)
        offset = cutting.finishing_pass_offset if z_level.is_finishing else 0.0

        label = 'Finishing Pass' if z_level.is_finishing else f"Roughing Z Level {level_index + 1}"
        lines = [
            f"; {label}: {format_coordinate(z_level.depth)}mm "
            f"(Safe Z: {format_coordinate(cutting.retract_height)}mm)"
        ]
        if offset:
            lines.append(f"; Offset: {format_coordinate(offset)}mm")

        last_command: Optional[str] = None
        last_feed: Optional[float] = None

        for point in points:
            x = point.x + offset
            y = point.y + offset

            if point.type == 'rapid':
                if last_command != 'G0':
                    last_command = 'G0'
                    last_feed = None
                lines.append(generate_rapid_move(x=x, y=y, z=point.z))
                continue

            command = ('G2' if point.clockwise else 'G3') if point.is_arc else 'G1'
            feed = None
            if (command != last_command or point.feed_rate != last_feed) and point.feed_rate > 0:
                feed = point.feed_rate
                last_feed = point.feed_rate
            last_command = command

            if point.is_arc:
                lines.append(generate_arc_move(
                    bool(point.clockwise), x, y, point.z, i=point.i, j=point.j, feed=feed
                ))
            else:
                lines.append(generate_linear_move(x, y, point.z, feed=feed))

        lines.append("")
        return lines

    def generate(self, toolpath: List[List[ToolpathPoint]]) -> str:
        """
        Generate the complete program.

        Args:
            toolpath: Levels in cutting order

        Returns:
            G-code program text
        """
        params = self.params
        retract_height = params.cutting.retract_height

        lines = []
        lines.extend(generate_header(params, self.tool_number))
        lines.extend(generate_stock_metadata(params))
        lines.extend(generate_setup(self.tool_number, params.feeds.spindle_speed, self.workplace))

        if toolpath and toolpath[0]:
            first = toolpath[0][0]
            lines.extend(generate_positioning(first.x, first.y, retract_height))

        for level_index, points in enumerate(toolpath):
            if points:
                lines.extend(self._generate_level(level_index, points))

        lines.extend(generate_footer(retract_height))
        return "\n".join(lines)


def generate_gcode(
    toolpath: List[List[ToolpathPoint]],
    params: ToolpathGenerationParams,
    current_tool: int = 0,
    workplace: int = 1
) -> str:
    """
    Emit a G-code program for a facing toolpath.

    Args:
        toolpath: Levels in cutting order
        params: Parameters the toolpath was generated from
        current_tool: Tool in the spindle
        workplace: 1-based work coordinate index

    Returns:
        G-code program text
    """
    return FacingGCodeGenerator(params, current_tool, workplace).generate(toolpath)
