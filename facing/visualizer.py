import os
import matplotlib.pyplot as plt
import numpy as np
from typing import List, Tuple

from .models import ToolpathGenerationParams, ToolpathPoint
from .scan_rows import calculate_stock_center
from .utils.arc_utils import calculate_arc_sweep
from .utils.geometry import calculate_origin_offset


def sample_arc(start: Tuple[float, float], point: ToolpathPoint, segments_per_turn: int = 72) -> np.ndarray:
    """
    Sample an arc move into polyline points.

    Args:
        start: Position before the arc
        point: Arc point (I/J relative to start)
        segments_per_turn: Sampling density

    Returns:
        (n, 2) array from start to the arc end
    """
    cx = start[0] + point.i
    cy = start[1] + point.j
    radius = np.hypot(start[0] - cx, start[1] - cy)
    sweep = calculate_arc_sweep(start, (point.x, point.y), (cx, cy), bool(point.clockwise))
    start_angle = np.arctan2(start[1] - cy, start[0] - cx)

    count = max(2, int(np.ceil(abs(sweep) / (2 * np.pi) * segments_per_turn)) + 1)
    angles = start_angle + np.linspace(0.0, sweep, count)
    samples = np.column_stack((cx + radius * np.cos(angles), cy + radius * np.sin(angles)))
    samples[-1] = (point.x, point.y)
    return samples


def level_polylines(level: List[ToolpathPoint]) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Split a level into cutting and rapid polylines.

    Returns:
        (cutting, rapid) lists of (n, 2) arrays
    """
    cutting, rapid = [], []
    for prev, point in zip(level, level[1:]):
        start = (prev.x, prev.y)
        if point.is_arc and point.i is not None and point.j is not None:
            cutting.append(sample_arc(start, point))
            continue
        segment = np.array([start, (point.x, point.y)])
        if np.allclose(segment[0], segment[1]):
            continue
        (rapid if point.type == 'rapid' else cutting).append(segment)
    return cutting, rapid


def _stock_outline(params: ToolpathGenerationParams):
    stock = params.stock
    if stock.is_circular:
        return plt.Circle(calculate_stock_center(params), stock.size_x / 2, color='black',
                          fill=False, linewidth=2, label="Stock")
    offset_x, offset_y = calculate_origin_offset(stock.size_x, stock.size_y, stock.origin_position)
    return plt.Rectangle((offset_x, offset_y), stock.size_x, stock.size_y, color='black',
                         fill=False, linewidth=2, label="Stock")


def plot_toolpath_preview(toolpath: List[List[ToolpathPoint]], params: ToolpathGenerationParams,
                          output_file: str = None, dpi: int = 300, font_size: int = 8,
                          show: bool = True):
    """
    Generate a visual preview of a facing toolpath.

    Only the last level is drawn; every level shares the same XY path
    except for the finishing offset.

    Args:
        toolpath: Levels in cutting order
        params: Generation parameters
        output_file: Optional path to save the plot
        dpi: Plot resolution
        font_size: Font size for annotations
        show: Open an interactive window
    """
    fig, ax = plt.subplots(figsize=(10, 8), dpi=dpi)

    ax.add_patch(_stock_outline(params))

    if toolpath:
        cutting, rapid = level_polylines(toolpath[-1])
        for index, line in enumerate(cutting):
            ax.plot(line[:, 0], line[:, 1], color='blue', linewidth=1,
                    label="Cutting" if index == 0 else "")
        for index, line in enumerate(rapid):
            ax.plot(line[:, 0], line[:, 1], color='red', linewidth=0.8, linestyle='--',
                    alpha=0.6, label="Rapid" if index == 0 else "")

        first = toolpath[0][0] if toolpath[0] else None
        if first:
            ax.plot(first.x, first.y, 'g^', markersize=8, label="Start")

    pattern = params.pattern
    ax.set_xlabel("X-axis (mm)", fontsize=font_size + 2)
    ax.set_ylabel("Y-axis (mm)", fontsize=font_size + 2)
    ax.set_title(f"Facing Toolpath Preview\n{pattern.type} at {pattern.angle:g}°, "
                 f"{pattern.milling_direction}, tool ⌀{params.cutting.tool_diameter:.2f}mm",
                 fontsize=font_size + 4)
    ax.legend(fontsize=font_size)
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.margins(0.1)

    point_count = sum(len(level) for level in toolpath)
    stats_text = f"Levels: {len(toolpath)}\nPoints: {point_count}"
    ax.text(0.02, 0.02, stats_text, transform=ax.transAxes,
            fontsize=font_size, verticalalignment='bottom', horizontalalignment='left',
            bbox=dict(boxstyle="round,pad=0.5", facecolor="lightblue", alpha=0.8))

    plt.tight_layout()

    if output_file:
        fig.savefig(output_file, dpi=dpi, bbox_inches='tight')

    if show:
        plt.show()
    else:
        plt.close(fig)


def save_plot_preview(toolpath: List[List[ToolpathPoint]], params: ToolpathGenerationParams,
                      base_filename: str, output_dir: str = "output") -> str:
    """
    Save a plot preview to the output directory.

    Args:
        toolpath: Levels in cutting order
        params: Generation parameters
        base_filename: Base name for the output file (without extension)
        output_dir: Directory to write into

    Returns:
        Path of the saved image
    """
    plot_filename = os.path.join(output_dir, f"{base_filename}_preview.png")
    plot_toolpath_preview(toolpath, params, plot_filename, dpi=150, font_size=10, show=False)
    return plot_filename
