"""Shared dataclasses for facing toolpath generation."""
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple


STOCK_SHAPES = ('rectangular', 'circular')
PATTERN_TYPES = ('rectilinear', 'zigzag', 'spiral')
MILLING_DIRECTIONS = ('climb', 'conventional')
SPIRAL_DIRECTIONS = ('outside-in', 'inside-out')
MOVE_TYPES = ('rapid', 'linear', 'arc')


@dataclass
class StockGeometry:
    """Workpiece outline and where program zero sits on it."""
    shape: str = 'rectangular'         # 'rectangular' or 'circular'
    width: Optional[float] = None      # X size, rectangular only
    depth: Optional[float] = None      # Y size, rectangular only
    diameter: Optional[float] = None   # circular only
    height: Optional[float] = None
    origin_position: str = 'front-left'  # '<front|center|back>-<left|center|right>'

    @property
    def is_circular(self) -> bool:
        return self.shape == 'circular'

    @property
    def size_x(self) -> float:
        if self.is_circular:
            return self.diameter or 0.0
        return self.width or 0.0

    @property
    def size_y(self) -> float:
        if self.is_circular:
            return self.diameter or 0.0
        return self.depth or 0.0


@dataclass
class CuttingParameters:
    """Tool and depth parameters for a facing operation."""
    tool_radius: float
    stepover: float          # percent of tool diameter
    stepdown: float
    total_depth: float
    safe_z_height: float     # above the stock top
    z_offset: float = 0.0    # Z of the stock top
    clear_stock_exit: bool = True
    finishing_pass: bool = False
    finishing_pass_height: float = 0.0
    finishing_pass_offset: float = 0.0

    @property
    def tool_diameter(self) -> float:
        return self.tool_radius * 2

    @property
    def retract_height(self) -> float:
        """Absolute Z of the safe retract plane."""
        return self.z_offset + self.safe_z_height


@dataclass
class FacingPattern:
    """Path topology and direction settings."""
    type: str = 'rectilinear'
    angle: float = 0.0
    milling_direction: str = 'climb'
    spiral_segments_per_revolution: int = 36
    spiral_direction: str = 'outside-in'


@dataclass
class FeedRates:
    """Feed rates (mm/min) and spindle speed (RPM)."""
    xy: float
    z: float
    spindle_speed: float


@dataclass
class ToolpathGenerationParams:
    """Everything the engine needs to plan a facing toolpath."""
    stock: StockGeometry
    cutting: CuttingParameters
    pattern: FacingPattern
    feeds: FeedRates


@dataclass
class ToolpathPoint:
    """A single move target.

    For arcs, (i, j) is the centre offset relative to the point preceding
    this one, matching G2/G3 I/J semantics.
    """
    x: float
    y: float
    z: float
    feed_rate: float = 0.0
    type: str = 'linear'  # 'rapid', 'linear', 'arc'
    i: Optional[float] = None
    j: Optional[float] = None
    clockwise: Optional[bool] = None
    comment: Optional[str] = None

    @property
    def is_arc(self) -> bool:
        return self.type == 'arc'

    def moved(self, **changes) -> 'ToolpathPoint':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


@dataclass
class ZLevel:
    """One planned cutting depth."""
    depth: float
    is_finishing: bool = False


@dataclass
class EffectiveBoundary:
    """Tool-compensated working envelope used by the spiral generator."""
    is_circular: bool
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    radius: float
    center_x: float
    center_y: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.center_x, self.center_y


@dataclass
class GenerationOptions:
    """Optional hooks for a generation call."""
    should_abort: Optional[Callable[[], bool]] = None
    on_progress: Optional[Callable[[float, str], None]] = None
    on_debug: Optional[Callable[[str], None]] = None

    def aborted(self) -> bool:
        return bool(self.should_abort and self.should_abort())

    def progress(self, percent: float, message: str = '') -> None:
        if self.on_progress:
            self.on_progress(percent, message)

    def debug(self, message: str) -> None:
        if self.on_debug:
            self.on_debug(message)


Level = List[ToolpathPoint]
Toolpath = List[Level]
