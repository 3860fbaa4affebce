"""Shared utility modules for facing toolpath generation."""

from .geometry import (
    POSITION_TOLERANCE,
    BOUNDARY_CLEARANCE,
    calculate_effective_cutting_width,
    calculate_number_of_passes,
    calculate_origin_offset,
    rotate_point,
    intersect_segment_circle,
    clip_segment_to_circle,
    clip_segment_to_box,
    get_line_intersection,
    calculate_dog_leg_move
)
from .multipass import calculate_num_passes, calculate_z_levels
from .arc_utils import milling_sign, is_clockwise_arc, calculate_ij_offsets, calculate_arc_length
from .normalizer import normalize_level_points
from .gcode_format import (
    format_coordinate,
    generate_header,
    generate_footer,
    generate_rapid_move,
    generate_linear_move,
    generate_arc_move,
    sanitize_program_name
)
from .validators import (
    validate_generation_params,
    get_parameter_warnings,
    validate_arc_geometry,
    detect_combined_xyz_moves,
    detect_vertical_linear_retracts,
    detect_xy_linear_at_safe_z
)

__all__ = [
    # geometry
    'POSITION_TOLERANCE',
    'BOUNDARY_CLEARANCE',
    'calculate_effective_cutting_width',
    'calculate_number_of_passes',
    'calculate_origin_offset',
    'rotate_point',
    'intersect_segment_circle',
    'clip_segment_to_circle',
    'clip_segment_to_box',
    'get_line_intersection',
    'calculate_dog_leg_move',
    # multipass
    'calculate_num_passes',
    'calculate_z_levels',
    # arc_utils
    'milling_sign',
    'is_clockwise_arc',
    'calculate_ij_offsets',
    'calculate_arc_length',
    # normalizer
    'normalize_level_points',
    # gcode_format
    'format_coordinate',
    'generate_header',
    'generate_footer',
    'generate_rapid_move',
    'generate_linear_move',
    'generate_arc_move',
    'sanitize_program_name',
    # validators
    'validate_generation_params',
    'get_parameter_warnings',
    'validate_arc_geometry',
    'detect_combined_xyz_moves',
    'detect_vertical_linear_retracts',
    'detect_xy_linear_at_safe_z',
]
