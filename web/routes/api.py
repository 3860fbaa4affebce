"""API routes - toolpath jobs, G-code and previews."""
import io
import logging

from flask import Blueprint, current_app, request, send_file

from facing.params_parser import ParseError, parse_generation_params, toolpath_from_dict
from web.auth import login_required
from web.services.gcode_service import GCodeService
from web.services.preview_service import PreviewService
from web.services.toolpath_service import ToolpathService
from web.utils.responses import accepted_response, success_response, error_response, validation_response

api_bp = Blueprint('api', __name__)
logger = logging.getLogger(__name__)


@api_bp.route('/toolpaths/validate', methods=['POST'])
@login_required
def validate_toolpath():
    """Validate generation parameters without starting a job."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    errors = ToolpathService.validate(data)
    return validation_response(errors)


@api_bp.route('/toolpaths', methods=['POST'])
@login_required
def create_toolpath():
    """Start a toolpath generation job."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    errors = ToolpathService.validate(data)
    if errors:
        return error_response('; '.join(errors))

    try:
        job = ToolpathService.create_job(data)
    except ParseError as e:
        return error_response(str(e))

    if job.is_finished:
        return success_response(data=job.to_dict())
    return accepted_response(data=job.to_dict())


@api_bp.route('/toolpaths/<job_id>')
@login_required
def get_toolpath(job_id):
    """Job status, optionally with the full toolpath."""
    job = ToolpathService.get(job_id)
    if not job:
        return error_response('Job not found', 404)

    include_toolpath = request.args.get('include_toolpath', '').lower() in ('1', 'true', 'yes')
    return success_response(data=job.to_dict(include_toolpath=include_toolpath))


@api_bp.route('/toolpaths/<job_id>/cancel', methods=['POST'])
@login_required
def cancel_toolpath(job_id):
    """Request cancellation of a running job."""
    job = ToolpathService.get(job_id)
    if not job:
        return error_response('Job not found', 404)
    if job.is_finished:
        return error_response(f'Job already {job.status}', 409)

    job = ToolpathService.cancel(job_id)
    return success_response(data=job.to_dict(), message='Cancellation requested')


@api_bp.route('/toolpaths/<job_id>/gcode')
@login_required
def get_gcode(job_id):
    """
    G-code for a finished job.

    Query args: tool, workplace, download (send as attachment).
    """
    job = ToolpathService.get(job_id)
    if not job:
        return error_response('Job not found', 404)
    if not job.toolpath:
        return error_response(f'Job has no toolpath (status: {job.status})', 409)

    try:
        tool_number = int(request.args.get('tool', current_app.config['DEFAULT_TOOL_NUMBER']))
        workplace = int(request.args.get('workplace', current_app.config['DEFAULT_WORKPLACE']))
    except ValueError:
        return error_response('tool and workplace must be integers')
    if not 1 <= workplace <= 6:
        return error_response('workplace must be between 1 and 6')

    try:
        gcode = GCodeService.generate_program(job, tool_number, workplace)
    except (ParseError, ValueError) as e:
        logger.warning("G-code generation failed for job %s: %s", job_id, e)
        return error_response(str(e))

    filename = GCodeService.build_filename(job)
    if request.args.get('download', '').lower() in ('1', 'true', 'yes'):
        buffer = io.BytesIO(gcode.encode('utf-8'))
        buffer.seek(0)
        return send_file(
            buffer,
            mimetype='text/plain',
            as_attachment=True,
            download_name=filename
        )

    return success_response(data={
        'filename': filename,
        'gcode': gcode,
        'warnings': GCodeService.get_validation_warnings(job)
    })


@api_bp.route('/toolpaths/<job_id>/preview')
@login_required
def preview_toolpath(job_id):
    """SVG preview of one level (the last by default)."""
    job = ToolpathService.get(job_id)
    if not job:
        return error_response('Job not found', 404)
    if not job.toolpath:
        return error_response(f'Job has no toolpath (status: {job.status})', 409)

    level = request.args.get('level', type=int)
    try:
        params = parse_generation_params(job.params)
        svg = PreviewService.generate_level_svg(toolpath_from_dict(job.toolpath), params, level)
    except IndexError as e:
        return error_response(str(e), 404)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    return success_response(data={'svg': svg})
