"""G-code generation service."""
from typing import Dict, List

from web.models import ToolpathJob

from facing.gcode_generator import generate_gcode
from facing.params_parser import parse_generation_params, toolpath_from_dict
from facing.utils.gcode_format import sanitize_program_name
from facing.utils.validators import (
    detect_combined_xyz_moves,
    detect_vertical_linear_retracts,
    detect_xy_linear_at_safe_z,
    get_parameter_warnings,
    validate_arc_geometry
)


class GCodeService:
    """Service for G-code generation and validation."""

    @staticmethod
    def generate_program(job: ToolpathJob, tool_number: int = 0, workplace: int = 1) -> str:
        """
        Emit the G-code program for a finished job.

        Raises:
            ValueError: If the job has no toolpath
        """
        if not job.toolpath:
            raise ValueError("Job has no toolpath")

        params = parse_generation_params(job.params)
        toolpath = toolpath_from_dict(job.toolpath)
        return generate_gcode(toolpath, params, tool_number, workplace)

    @staticmethod
    def get_validation_warnings(job: ToolpathJob) -> List[str]:
        """
        Get non-blocking warnings for a job.

        Covers risky parameters and suspicious moves in the generated
        toolpath. None of these prevent G-code output.
        """
        params = parse_generation_params(job.params)
        warnings = get_parameter_warnings(params)

        if not job.toolpath:
            return warnings

        toolpath = toolpath_from_dict(job.toolpath)
        for level_index, level in enumerate(toolpath):
            for warning in validate_arc_geometry(level):
                warnings.append(f"Level {level_index + 1}: {warning}")

        checks = (
            (detect_combined_xyz_moves(toolpath), "combined XY+Z move"),
            (detect_vertical_linear_retracts(toolpath), "retract at feed rate"),
            (detect_xy_linear_at_safe_z(toolpath, params.cutting.retract_height), "feed move at safe height"),
        )
        for issues, description in checks:
            for issue in issues:
                warnings.append(f"Level {issue.level + 1}, point {issue.index}: {description}")

        return warnings

    @staticmethod
    def build_filename(job: ToolpathJob) -> str:
        pattern = (job.params or {}).get('pattern', {}).get('type', 'facing')
        return f"{sanitize_program_name(f'facing_{pattern}_{job.id[:8]}')}.gcode"

    @staticmethod
    def get_gcode_preview(job: ToolpathJob, tool_number: int = 0, workplace: int = 1,
                          max_lines: int = 50) -> Dict:
        """First lines of the program, for display."""
        gcode = GCodeService.generate_program(job, tool_number, workplace)
        lines = gcode.split('\n')
        return {
            'filename': GCodeService.build_filename(job),
            'lines': lines[:max_lines],
            'total_lines': len(lines)
        }
