"""SVG preview generation service for toolpath visualization."""
from typing import List, Optional, Tuple

from facing.models import ToolpathGenerationParams, ToolpathPoint
from facing.scan_rows import calculate_stock_center
from facing.utils.geometry import calculate_origin_offset
from facing.utils.svg_arc import cnc_to_svg_coords, generate_svg_arc_command


# Color palette for different move types
class Colors:
    """SVG color constants for preview elements."""
    # Move colors
    CUT = '#5a7a8a'          # Teal
    ARC = '#5a8a6e'          # Green
    RAPID = '#ff8c00'        # Orange
    ENTRY = '#2F055A'        # Purple

    # Background colors
    BACKGROUND = '#f8f9fa'   # Off-white
    STOCK_FILL = '#e9ecef'   # Light gray
    STOCK_OUTLINE = '#ced4da'  # Medium gray
    AXIS_LABEL = '#6c757d'   # Dark gray


class PreviewService:
    """Service for generating SVG previews of toolpaths."""

    # SVG rendering constants
    PADDING = 20
    TARGET_SIZE = 600  # pixels along the longer side

    @staticmethod
    def generate_svg(
        level: List[ToolpathPoint],
        params: ToolpathGenerationParams,
        show_rapids: bool = True
    ) -> str:
        """
        Generate SVG markup for one toolpath level.

        Args:
            level: Points of the level to draw
            params: Parameters the level was generated from
            show_rapids: Draw rapid moves as dashed lines

        Returns:
            Complete SVG markup string
        """
        padding = PreviewService.PADDING
        min_x, min_y, max_x, max_y = PreviewService._calculate_bounds(level, params)
        span = max(max_x - min_x, max_y - min_y, 1e-9)
        scale = PreviewService.TARGET_SIZE / span

        svg_width = (max_x - min_x) * scale + padding * 2
        svg_height = (max_y - min_y) * scale + padding * 2

        svg_parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {svg_width:.2f} {svg_height:.2f}" '
            f'width="{svg_width:.2f}" height="{svg_height:.2f}" style="background: {Colors.BACKGROUND};">'
        ]

        PreviewService._draw_stock(svg_parts, params, min_x, max_y, scale, padding)
        PreviewService._draw_moves(svg_parts, level, min_x, max_y, scale, padding, show_rapids)
        PreviewService._draw_entry(svg_parts, level, min_x, max_y, scale, padding)

        svg_parts.append('</svg>')
        return ''.join(svg_parts)

    @staticmethod
    def _calculate_bounds(
        level: List[ToolpathPoint],
        params: ToolpathGenerationParams
    ) -> Tuple[float, float, float, float]:
        """Bounding box of the stock and every point, as (min_x, min_y, max_x, max_y)."""
        stock = params.stock
        offset_x, offset_y = calculate_origin_offset(stock.size_x, stock.size_y, stock.origin_position)
        xs = [offset_x, offset_x + stock.size_x] + [p.x for p in level]
        ys = [offset_y, offset_y + stock.size_y] + [p.y for p in level]
        return min(xs), min(ys), max(xs), max(ys)

    @staticmethod
    def _draw_stock(
        svg_parts: List[str],
        params: ToolpathGenerationParams,
        min_x: float,
        max_y: float,
        scale: float,
        padding: float
    ) -> None:
        """Draw the stock outline as a rectangle or circle."""
        stock = params.stock
        style = f'fill="{Colors.STOCK_FILL}" stroke="{Colors.STOCK_OUTLINE}" stroke-width="2"'

        if stock.is_circular:
            cx, cy = cnc_to_svg_coords(*calculate_stock_center(params), min_x, max_y, scale, padding)
            r = stock.size_x / 2 * scale
            svg_parts.append(f'<circle cx="{cx:.4f}" cy="{cy:.4f}" r="{r:.4f}" {style}/>')
            return

        offset_x, offset_y = calculate_origin_offset(stock.size_x, stock.size_y, stock.origin_position)
        # Top-left corner in SVG space is the back-left corner of the stock
        x, y = cnc_to_svg_coords(offset_x, offset_y + stock.size_y, min_x, max_y, scale, padding)
        svg_parts.append(
            f'<rect x="{x:.4f}" y="{y:.4f}" width="{stock.size_x * scale:.4f}" '
            f'height="{stock.size_y * scale:.4f}" {style}/>'
        )

    @staticmethod
    def _move_command(
        prev: ToolpathPoint,
        point: ToolpathPoint,
        min_x: float,
        max_y: float,
        scale: float,
        padding: float
    ) -> str:
        if point.is_arc and point.i is not None and point.j is not None:
            center = (prev.x + point.i, prev.y + point.j)
            return generate_svg_arc_command(
                (prev.x, prev.y), (point.x, point.y), center, bool(point.clockwise),
                min_x, max_y, scale, padding
            )
        x, y = cnc_to_svg_coords(point.x, point.y, min_x, max_y, scale, padding)
        return f"L {x:.4f} {y:.4f}"

    @staticmethod
    def _draw_moves(
        svg_parts: List[str],
        level: List[ToolpathPoint],
        min_x: float,
        max_y: float,
        scale: float,
        padding: float,
        show_rapids: bool
    ) -> None:
        """
        Draw the level's planar moves.

        Consecutive feed moves are joined into one path; each rapid is
        drawn on its own. Pure Z moves draw nothing.
        """
        cut_path: List[str] = []

        def flush():
            if len(cut_path) > 1:
                svg_parts.append(
                    f'<path d="{" ".join(cut_path)}" fill="none" stroke="{Colors.CUT}" '
                    f'stroke-width="1.5" stroke-linejoin="round"/>'
                )
            cut_path.clear()

        for prev, point in zip(level, level[1:]):
            if abs(prev.x - point.x) < 1e-9 and abs(prev.y - point.y) < 1e-9:
                continue

            if point.type == 'rapid':
                flush()
                if show_rapids:
                    x1, y1 = cnc_to_svg_coords(prev.x, prev.y, min_x, max_y, scale, padding)
                    x2, y2 = cnc_to_svg_coords(point.x, point.y, min_x, max_y, scale, padding)
                    svg_parts.append(
                        f'<line x1="{x1:.4f}" y1="{y1:.4f}" x2="{x2:.4f}" y2="{y2:.4f}" '
                        f'stroke="{Colors.RAPID}" stroke-width="1" stroke-dasharray="5,3"/>'
                    )
                continue

            if not cut_path:
                x, y = cnc_to_svg_coords(prev.x, prev.y, min_x, max_y, scale, padding)
                cut_path.append(f"M {x:.4f} {y:.4f}")
            cut_path.append(PreviewService._move_command(prev, point, min_x, max_y, scale, padding))

        flush()

    @staticmethod
    def _draw_entry(
        svg_parts: List[str],
        level: List[ToolpathPoint],
        min_x: float,
        max_y: float,
        scale: float,
        padding: float
    ) -> None:
        """Mark the first point of the level."""
        if not level:
            return
        cx, cy = cnc_to_svg_coords(level[0].x, level[0].y, min_x, max_y, scale, padding)
        svg_parts.append(f'<circle cx="{cx:.4f}" cy="{cy:.4f}" r="4" fill="{Colors.ENTRY}"/>')

    @staticmethod
    def generate_level_svg(
        toolpath: List[List[ToolpathPoint]],
        params: ToolpathGenerationParams,
        level_index: Optional[int] = None
    ) -> str:
        """
        Preview one level of a toolpath, the last one by default.

        Raises:
            IndexError: If level_index is out of range
        """
        if not toolpath:
            return PreviewService.generate_svg([], params)
        index = len(toolpath) - 1 if level_index is None else level_index
        if index < 0 or index >= len(toolpath):
            raise IndexError(f"Level {index} out of range (0-{len(toolpath) - 1})")
        return PreviewService.generate_svg(toolpath[index], params)
