"""Spiral facing pattern with corner and side peeling.

A centered spiral only reaches a circle, so on rectangular stock the
material outside that circle is peeled first: concentric arcs in each
corner, then (on non-square stock) arcs across the two far sides. The
remaining interior is cleared by an Archimedean spiral that ends in a
small cleanout circle at the center.

Work for one level is a queue of PeelTask entries consumed by a single
dispatch loop. Arcs turn counter-clockwise for climb milling and
clockwise for conventional milling.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .models import (
    EffectiveBoundary,
    FeedRates,
    GenerationOptions,
    StockGeometry,
    ToolpathGenerationParams,
    ToolpathPoint,
)
from .utils.arc_utils import calculate_ij_offsets, milling_sign
from .utils.geometry import (
    BOUNDARY_CLEARANCE,
    POSITION_TOLERANCE,
    Point2D,
    calculate_dog_leg_move,
    calculate_effective_cutting_width,
    calculate_origin_offset,
    distance,
    get_line_intersection,
)
from .utils.multipass import calculate_z_levels
from .utils.normalizer import normalize_level_points

CORNERS = ('top-left', 'top-right', 'bottom-right', 'bottom-left')
SIDES = ('top', 'bottom', 'left', 'right')

MIN_SEGMENTS_PER_REVOLUTION = 36

Arc = Tuple[Point2D, Point2D]


class TaskKind(Enum):
    CORNER = 'corner'
    SIDE = 'side'
    SPIRAL = 'spiral'


@dataclass(frozen=True)
class PeelTask:
    """One unit of work in a level's queue."""
    kind: TaskKind
    target: Optional[str] = None  # corner or side name

    @property
    def label(self) -> str:
        if self.target:
            return f"{self.kind.value} {self.target}"
        return self.kind.value


def build_peel_queue(stock: StockGeometry, spiral_direction: str = 'outside-in') -> List[PeelTask]:
    """
    Build the task queue for one level.

    Landscape stock peels the left then the right side, portrait stock the
    top then the bottom, square stock only its corners. Circular stock is a
    spiral alone. Inside-out spirals run before the peeling.

    Args:
        stock: Stock geometry
        spiral_direction: 'outside-in' or 'inside-out'

    Returns:
        Tasks in execution order
    """
    peel = []
    if not stock.is_circular:
        size_x, size_y = stock.size_x, stock.size_y
        if size_x > size_y:
            groups = ((('top-left', 'bottom-left'), 'left'), (('top-right', 'bottom-right'), 'right'))
        elif size_y > size_x:
            groups = ((('top-left', 'top-right'), 'top'), (('bottom-left', 'bottom-right'), 'bottom'))
        else:
            groups = ((CORNERS, None),)

        for corners, side in groups:
            peel.extend(PeelTask(TaskKind.CORNER, corner) for corner in corners)
            if side:
                peel.append(PeelTask(TaskKind.SIDE, side))

    spiral = PeelTask(TaskKind.SPIRAL)
    if spiral_direction == 'inside-out':
        return [spiral] + peel
    return peel + [spiral]


def calculate_stock_boundary(params: ToolpathGenerationParams) -> EffectiveBoundary:
    """Uncompensated stock outline."""
    stock = params.stock
    size_x, size_y = stock.size_x, stock.size_y
    offset_x, offset_y = calculate_origin_offset(size_x, size_y, stock.origin_position)
    return EffectiveBoundary(
        is_circular=stock.is_circular,
        x_min=offset_x,
        x_max=offset_x + size_x,
        y_min=offset_y,
        y_max=offset_y + size_y,
        radius=size_x / 2 if stock.is_circular else 0.0,
        center_x=offset_x + size_x / 2,
        center_y=offset_y + size_y / 2
    )


def calculate_effective_boundary(params: ToolpathGenerationParams) -> EffectiveBoundary:
    """Stock outline grown by the tool radius plus boundary clearance."""
    stock_boundary = calculate_stock_boundary(params)
    grow = params.cutting.tool_radius + BOUNDARY_CLEARANCE
    return EffectiveBoundary(
        is_circular=stock_boundary.is_circular,
        x_min=stock_boundary.x_min - grow,
        x_max=stock_boundary.x_max + grow,
        y_min=stock_boundary.y_min - grow,
        y_max=stock_boundary.y_max + grow,
        radius=stock_boundary.radius + grow if stock_boundary.is_circular else 0.0,
        center_x=stock_boundary.center_x,
        center_y=stock_boundary.center_y
    )


def get_corner_coords(corner: str, boundary: EffectiveBoundary) -> Point2D:
    x = boundary.x_min if corner.endswith('left') else boundary.x_max
    y = boundary.y_max if corner.startswith('top') else boundary.y_min
    return x, y


def _ordered(p1: Optional[Point2D], p2: Optional[Point2D], sign: int) -> Optional[Arc]:
    if p1 is None or p2 is None:
        return None
    return (p1, p2) if sign == 1 else (p2, p1)


def calculate_corner_arc(
    radius: float,
    corner: str,
    boundary: EffectiveBoundary,
    sign: int
) -> Optional[Arc]:
    """
    Arc of a given radius about the boundary center, cut off by the two
    walls that meet at a corner.

    Args:
        radius: Arc radius
        corner: Corner name
        boundary: Boundary whose walls bound the arc
        sign: 1 for counter-clockwise travel, -1 for clockwise

    Returns:
        (start, end) in travel order, or None if the circle misses a wall
    """
    center = boundary.center
    if corner == 'top-left':
        p1 = get_line_intersection(radius, boundary.y_max, True, center, False)
        p2 = get_line_intersection(radius, boundary.x_min, False, center, True)
    elif corner == 'top-right':
        p1 = get_line_intersection(radius, boundary.x_max, False, center, True)
        p2 = get_line_intersection(radius, boundary.y_max, True, center, True)
    elif corner == 'bottom-right':
        p1 = get_line_intersection(radius, boundary.y_min, True, center, True)
        p2 = get_line_intersection(radius, boundary.x_max, False, center, False)
    elif corner == 'bottom-left':
        p1 = get_line_intersection(radius, boundary.x_min, False, center, False)
        p2 = get_line_intersection(radius, boundary.y_min, True, center, False)
    else:
        raise ValueError(f"Unknown corner: {corner}")
    return _ordered(p1, p2, sign)


def calculate_side_arc(
    radius: float,
    side: str,
    boundary: EffectiveBoundary,
    sign: int
) -> Optional[Arc]:
    """
    Arc of a given radius across one side, cut off by the two walls
    perpendicular to that side.

    Returns:
        (start, end) in travel order, or None if the circle misses a wall
    """
    center = boundary.center
    if side == 'top':
        p1 = get_line_intersection(radius, boundary.x_max, False, center, True)
        p2 = get_line_intersection(radius, boundary.x_min, False, center, True)
    elif side == 'bottom':
        p1 = get_line_intersection(radius, boundary.x_min, False, center, False)
        p2 = get_line_intersection(radius, boundary.x_max, False, center, False)
    elif side == 'left':
        p1 = get_line_intersection(radius, boundary.y_max, True, center, False)
        p2 = get_line_intersection(radius, boundary.y_min, True, center, False)
    elif side == 'right':
        p1 = get_line_intersection(radius, boundary.y_min, True, center, True)
        p2 = get_line_intersection(radius, boundary.y_max, True, center, True)
    else:
        raise ValueError(f"Unknown side: {side}")
    return _ordered(p1, p2, sign)


def calculate_side_semicircle(radius: float, side: str, center: Point2D, sign: int) -> Arc:
    """Half circle facing a side, for radii the perpendicular walls no longer bound."""
    cx, cy = center
    if side in ('left', 'right'):
        top, bottom = (cx, cy + radius), (cx, cy - radius)
        # Counter-clockwise runs top to bottom on the left, bottom to top on the right
        arc = (top, bottom) if side == 'left' else (bottom, top)
    else:
        left, right = (cx - radius, cy), (cx + radius, cy)
        arc = (right, left) if side == 'top' else (left, right)
    return arc if sign == 1 else (arc[1], arc[0])


def get_robust_side_arc(
    radius: float,
    side: str,
    boundary: EffectiveBoundary,
    sign: int
) -> Arc:
    """Bounded side arc, falling back to a semicircle."""
    arc = calculate_side_arc(radius, side, boundary, sign)
    if arc is None:
        arc = calculate_side_semicircle(radius, side, boundary.center, sign)
    return arc


def calculate_spiral_points(
    center: Point2D,
    start_radius: float,
    end_radius: float,
    start_angle: float,
    effective_width: float,
    sign: int,
    segments_per_revolution: int = MIN_SEGMENTS_PER_REVOLUTION
) -> List[Point2D]:
    """
    Discretize an Archimedean spiral between two radii.

    The radius changes by effective_width per revolution. The segment count
    scales with the number of revolutions and never drops below one
    revolution's worth.

    Args:
        center: Spiral center
        start_radius: Radius of the first point (not included in the result)
        end_radius: Radius of the last point
        start_angle: Polar angle of the first point, radians
        effective_width: Radial pitch
        sign: 1 for counter-clockwise travel, -1 for clockwise
        segments_per_revolution: Line segments per turn

    Returns:
        Points after the start point, ending on end_radius
    """
    radial_distance = end_radius - start_radius
    if abs(radial_distance) <= POSITION_TOLERANCE or effective_width <= 0:
        return []

    revolutions = abs(radial_distance) / effective_width
    segments = max(segments_per_revolution, math.ceil(revolutions * segments_per_revolution))
    angle_step = revolutions * 2 * math.pi / segments * sign
    radius_step = radial_distance / segments

    points = []
    for k in range(1, segments + 1):
        angle = start_angle + k * angle_step
        radius = start_radius + k * radius_step
        points.append((center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle)))
    return points


class LevelPath:
    """Point list for one level plus the moves the peel tasks share."""

    def __init__(self, depth: float, safe_z: float, feeds: FeedRates, center: Point2D, sign: int):
        self.points: List[ToolpathPoint] = []
        self.depth = depth
        self.safe_z = safe_z
        self.feeds = feeds
        self.center = center
        self.clockwise = sign == -1
        self.has_cut = False

    @property
    def last_xy(self) -> Point2D:
        last = self.points[-1]
        return last.x, last.y

    def append(self, point: ToolpathPoint) -> None:
        if self.points:
            last = self.points[-1]
            if (distance((last.x, last.y), (point.x, point.y)) <= POSITION_TOLERANCE and
                    abs(last.z - point.z) <= POSITION_TOLERANCE):
                return
        self.points.append(point)

    def enter(self, target: Point2D) -> None:
        """Rapid over the entry point and plunge to depth."""
        self.append(ToolpathPoint(
            x=target[0], y=target[1], z=self.safe_z, type='rapid', comment='Initial Rapid to Safe Z'
        ))
        self.plunge('Initial Plunge')

    def plunge(self, comment: str) -> None:
        x, y = self.last_xy
        self.append(ToolpathPoint(
            x=x, y=y, z=self.depth, feed_rate=self.feeds.z, type='linear', comment=comment
        ))

    def rapid_to(self, target: Point2D, label: str) -> None:
        """Retract, move over target, plunge."""
        if distance(self.last_xy, target) <= POSITION_TOLERANCE:
            return
        x, y = self.last_xy
        self.append(ToolpathPoint(x=x, y=y, z=self.safe_z, type='rapid', comment=f"Retract for {label}"))
        self.append(ToolpathPoint(
            x=target[0], y=target[1], z=self.safe_z, type='rapid', comment=f"Move to {label}"
        ))
        self.plunge(f"Plunge for {label}")

    def dog_leg_to(self, target: Point2D, label: str) -> None:
        """L-shaped rapid at cutting depth, through cleared material."""
        if abs(self.points[-1].z - self.depth) > POSITION_TOLERANCE:
            self.plunge(f"Plunge for {label}")
        for x, y in calculate_dog_leg_move(self.last_xy, target, self.center):
            self.append(ToolpathPoint(x=x, y=y, z=self.depth, type='rapid', comment=f"DogLeg to {label}"))

    def cut_to(self, target: Point2D, comment: Optional[str] = None) -> None:
        self.append(ToolpathPoint(
            x=target[0], y=target[1], z=self.depth, feed_rate=self.feeds.xy,
            type='linear', comment=comment
        ))
        self.has_cut = True

    def arc_to(self, target: Point2D, comment: Optional[str] = None) -> None:
        """Arc about the level center; I/J taken from the current position."""
        i, j = calculate_ij_offsets(self.last_xy, self.center)
        self.append(ToolpathPoint(
            x=target[0], y=target[1], z=self.depth, feed_rate=self.feeds.xy, type='arc',
            i=i, j=j, clockwise=self.clockwise, comment=comment
        ))
        self.has_cut = True

    def retract(self) -> None:
        if self.points:
            x, y = self.last_xy
            self.append(ToolpathPoint(x=x, y=y, z=self.safe_z, type='rapid', comment='Final Retract'))


class SpiralPlanner:
    """Plans spiral levels for one parameter set."""

    def __init__(self, params: ToolpathGenerationParams, options: Optional[GenerationOptions] = None):
        self.params = params
        self.options = options or GenerationOptions()
        self.stock_boundary = calculate_stock_boundary(params)
        self.boundary = calculate_effective_boundary(params)
        self.center = self.boundary.center
        self.sign = milling_sign(params.pattern.milling_direction)
        self.effective_width = calculate_effective_cutting_width(
            params.cutting.tool_radius, params.cutting.stepover
        )
        self.segments_per_revolution = max(
            MIN_SEGMENTS_PER_REVOLUTION, int(params.pattern.spiral_segments_per_revolution or 0)
        )
        self.inside_out = params.pattern.spiral_direction == 'inside-out'

    def entry_point(self, queue: List[PeelTask]) -> Point2D:
        """Where the tool first plunges on a level."""
        cx, cy = self.center
        if self.inside_out:
            return cx + self.params.cutting.tool_radius, cy
        if self.boundary.is_circular:
            return cx + self.boundary.radius, cy
        if queue and queue[0].kind is TaskKind.CORNER:
            return get_corner_coords(queue[0].target, self.boundary)
        return cx + min(self.params.stock.size_x, self.params.stock.size_y) / 2, cy

    def peel_corner(self, path: LevelPath, corner: str) -> None:
        """
        Cut shrinking arcs in one corner.

        Arcs start one effective width beyond the stock corner. Outside-in,
        the corner is done once an arc has been cut inside the corner
        distance, which leaves the tool about one effective width inside it.
        Inside-out, the arcs keep shrinking until they meet the ring the
        outward spiral already cleared.
        """
        corner_distance = distance(get_corner_coords(corner, self.stock_boundary), self.center)
        if self.inside_out:
            stop_radius = self.spiral_outer_radius() + self.effective_width
        else:
            stop_radius = corner_distance
        reach = distance(get_corner_coords(corner, self.boundary), self.center)
        radius = corner_distance + self.effective_width
        # Arc endpoints must stay on the walls, not past the boundary corner
        while radius >= reach - POSITION_TOLERANCE:
            radius -= self.effective_width
        first_arc = True

        while True:
            arc = calculate_corner_arc(radius, corner, self.boundary, self.sign)
            if arc is None:
                self.options.debug(f"Corner {corner}: radius {radius:.4f} misses the boundary")
                break

            start, end = arc
            if first_arc and path.has_cut:
                path.rapid_to(start, f"Corner Peel {corner}")
            else:
                path.dog_leg_to(start, corner)
            path.arc_to(end, f"Corner Peel {corner}")
            first_arc = False

            if self.inside_out and radius <= stop_radius + POSITION_TOLERANCE:
                break
            if not self.inside_out and radius + POSITION_TOLERANCE < stop_radius:
                break
            radius -= self.effective_width

        self.options.debug(f"Corner {corner}: last arc radius {radius:.4f}")

    def peel_side(self, path: LevelPath, side: str) -> None:
        """Cut shrinking arcs across one side until the spiral can take over."""
        stock = self.params.stock
        tool_radius = self.params.cutting.tool_radius
        half_side = stock.size_x / 2 if side in ('left', 'right') else stock.size_y / 2
        radius = half_side + tool_radius + BOUNDARY_CLEARANCE
        stop_radius = min(stock.size_x, stock.size_y) / 2 - 2 * tool_radius
        cx, cy = self.center

        while radius > stop_radius:
            start, end = get_robust_side_arc(radius, side, self.boundary, self.sign)
            path.rapid_to(start, f"Side Peel {side}")

            # Two halves keep every arc well under a full turn
            start_angle = math.atan2(start[1] - cy, start[0] - cx)
            end_angle = math.atan2(end[1] - cy, end[0] - cx)
            if self.sign == 1 and end_angle < start_angle:
                end_angle += 2 * math.pi
            if self.sign == -1 and end_angle > start_angle:
                end_angle -= 2 * math.pi
            mid_angle = (start_angle + end_angle) / 2
            mid = (cx + radius * math.cos(mid_angle), cy + radius * math.sin(mid_angle))

            path.arc_to(mid, f"Side Peel {side} Seg 1")
            path.arc_to(end, f"Side Peel {side} Seg 2")
            radius -= self.effective_width

        self.options.debug(f"Side {side}: handing off at radius {radius:.4f}")

    def center_cleanout(self, path: LevelPath) -> None:
        """Full circle at the tool radius so no boss is left at the center."""
        cx, cy = self.center
        r = self.params.cutting.tool_radius
        path.cut_to((cx + r, cy), 'Center Cleanout Start')
        path.arc_to((cx - r, cy), 'Center Cleanout 1')
        path.arc_to((cx + r, cy), 'Center Cleanout 2')

    def spiral_outer_radius(self) -> float:
        """Radius an inside-out spiral walks out to."""
        if self.boundary.is_circular:
            return self.boundary.radius
        stock = self.params.stock
        return min(stock.size_x, stock.size_y) / 2 + self.params.cutting.tool_radius + BOUNDARY_CLEARANCE

    def spiral(self, path: LevelPath) -> None:
        tool_radius = self.params.cutting.tool_radius
        cx, cy = self.center

        if self.inside_out:
            self.center_cleanout(path)
            outer_radius = self.spiral_outer_radius()
            self.options.debug(f"Spiral out from {tool_radius:.4f} to {outer_radius:.4f}")
            for point in calculate_spiral_points(
                self.center, tool_radius, outer_radius, 0.0,
                self.effective_width, self.sign, self.segments_per_revolution
            ):
                path.cut_to(point)
            return

        if self.boundary.is_circular:
            start = (cx + self.boundary.radius, cy)
        elif path.has_cut:
            start = path.last_xy
        else:
            stock = self.params.stock
            start = (cx + min(stock.size_x, stock.size_y) / 2, cy)

        path.rapid_to(start, 'Spiral Start')
        engage_radius = distance(start, self.center)
        engage_angle = math.atan2(start[1] - cy, start[0] - cx)
        self.options.debug(f"Spiral engages at radius {engage_radius:.4f}")

        if engage_radius > tool_radius:
            for point in calculate_spiral_points(
                self.center, engage_radius, tool_radius, engage_angle,
                self.effective_width, self.sign, self.segments_per_revolution
            ):
                path.cut_to(point)
        self.center_cleanout(path)

    def generate(self) -> List[List[ToolpathPoint]]:
        cutting = self.params.cutting
        z_levels = calculate_z_levels(cutting)
        queue = build_peel_queue(self.params.stock, self.params.pattern.spiral_direction)
        self.options.debug(f"Spiral: {len(z_levels)} levels, tasks: "
                           f"{', '.join(task.label for task in queue)}")

        all_levels = []
        for level_index, z_level in enumerate(z_levels):
            if self.options.aborted():
                return all_levels

            path = LevelPath(z_level.depth, cutting.retract_height, self.params.feeds, self.center, self.sign)
            path.enter(self.entry_point(queue))

            for task_index, task in enumerate(queue):
                if self.options.aborted():
                    return all_levels

                if task.kind is TaskKind.CORNER:
                    self.peel_corner(path, task.target)
                elif task.kind is TaskKind.SIDE:
                    self.peel_side(path, task.target)
                else:
                    self.spiral(path)

                done = level_index + (task_index + 1) / len(queue)
                self.options.progress(
                    done / len(z_levels) * 100,
                    f"Level {level_index + 1} of {len(z_levels)}: {task.label}"
                )

            path.retract()
            all_levels.append(normalize_level_points(path.points, self.params.feeds))

        return all_levels


def generate_spiral_pattern(
    params: ToolpathGenerationParams,
    options: Optional[GenerationOptions] = None
) -> List[List[ToolpathPoint]]:
    """
    Generate a spiral facing toolpath.

    Args:
        params: Generation parameters
        options: Abort/progress/debug hooks

    Returns:
        One list of points per depth level
    """
    return SpiralPlanner(params, options).generate()
