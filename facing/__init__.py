"""Facing toolpath planning and G-code generation."""

from .models import (
    StockGeometry,
    CuttingParameters,
    FacingPattern,
    FeedRates,
    ToolpathGenerationParams,
    ToolpathPoint,
    ZLevel,
    GenerationOptions
)
from .toolpath_generator import (
    generate,
    generate_toolpath,
    UnsupportedPatternError,
    PATTERN_GENERATORS
)
from .gcode_generator import FacingGCodeGenerator, generate_gcode
from .statistics import ToolpathStatistics, calculate_toolpath_statistics
from .params_parser import (
    ParseError,
    parse_generation_params,
    load_params_file,
    toolpath_to_dict,
    toolpath_from_dict
)
from .worker import handle_worker_request

__all__ = [
    # Data model
    'StockGeometry',
    'CuttingParameters',
    'FacingPattern',
    'FeedRates',
    'ToolpathGenerationParams',
    'ToolpathPoint',
    'ZLevel',
    'GenerationOptions',
    # Generation
    'generate',
    'generate_toolpath',
    'UnsupportedPatternError',
    'PATTERN_GENERATORS',
    # Emitter
    'FacingGCodeGenerator',
    'generate_gcode',
    # Statistics
    'ToolpathStatistics',
    'calculate_toolpath_statistics',
    # Parsing
    'ParseError',
    'parse_generation_params',
    'load_params_file',
    'toolpath_to_dict',
    'toolpath_from_dict',
    # Worker protocol
    'handle_worker_request',
]
