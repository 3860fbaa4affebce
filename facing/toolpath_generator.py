"""Facing toolpath entry point.

Dispatches to the pattern generator selected by params.pattern.type.
"""
from typing import Callable, Dict, List, Optional

from .models import GenerationOptions, ToolpathGenerationParams, ToolpathPoint
from .rectilinear_generator import generate_rectilinear_pattern
from .spiral_generator import generate_spiral_pattern
from .utils.geometry import calculate_effective_cutting_width
from .zigzag_generator import generate_zigzag_pattern

PatternGenerator = Callable[
    [ToolpathGenerationParams, Optional[GenerationOptions]], List[List[ToolpathPoint]]
]

PATTERN_GENERATORS: Dict[str, PatternGenerator] = {
    'rectilinear': generate_rectilinear_pattern,
    'zigzag': generate_zigzag_pattern,
    'spiral': generate_spiral_pattern,
}


class UnsupportedPatternError(ValueError):
    """Raised when the pattern type has no generator."""

    def __init__(self, pattern_type: str):
        self.pattern_type = pattern_type
        super().__init__(f"Unsupported facing pattern: {pattern_type}")


def generate_toolpath(
    params: ToolpathGenerationParams,
    options: Optional[GenerationOptions] = None
) -> List[List[ToolpathPoint]]:
    """
    Generate a complete facing toolpath.

    Args:
        params: Generation parameters
        options: Abort/progress/debug hooks

    Returns:
        One normalized point list per depth level, in cutting order. When
        aborted, only the levels finished before the abort.

    Raises:
        UnsupportedPatternError: If the pattern type is unknown
        ValueError: If the tool radius or effective cutting width is not positive
    """
    generator = PATTERN_GENERATORS.get(params.pattern.type)
    if generator is None:
        raise UnsupportedPatternError(params.pattern.type)

    if params.cutting.tool_radius <= 0:
        raise ValueError("Tool radius must be positive")
    if calculate_effective_cutting_width(params.cutting.tool_radius, params.cutting.stepover) <= 0:
        raise ValueError("Effective cutting width must be positive")

    return generator(params, options)


generate = generate_toolpath
