"""Background-execution protocol for toolpath generation.

A request {"type": "generate", "params": {...}} produces zero or more
progress messages followed by exactly one complete or error message, all
delivered through the post_message callback:

    {"type": "progress", "progress": 40.0, "message": "..."}
    {"type": "complete", "toolpath": [...], "statistics": {...}, "cancelled": False}
    {"type": "error", "error": "..."}
"""
import logging
from typing import Any, Callable, Dict, Optional

from .models import GenerationOptions
from .params_parser import parse_generation_params, toolpath_to_dict
from .statistics import calculate_toolpath_statistics
from .toolpath_generator import generate_toolpath
from .utils.validators import validate_generation_params

logger = logging.getLogger(__name__)

Message = Dict[str, Any]

# Share of the progress range given to the generator itself
GENERATION_PROGRESS_SPAN = 80.0


def progress_message(progress: float, message: str) -> Message:
    return {'type': 'progress', 'progress': round(progress, 1), 'message': message}


def complete_message(toolpath, statistics, cancelled: bool = False) -> Message:
    return {
        'type': 'complete',
        'toolpath': toolpath,
        'statistics': statistics,
        'cancelled': cancelled,
    }


def error_message(error: str) -> Message:
    return {'type': 'error', 'error': error}


def handle_worker_request(
    request: Dict[str, Any],
    post_message: Callable[[Message], None],
    should_abort: Optional[Callable[[], bool]] = None,
    on_debug: Optional[Callable[[str], None]] = None
) -> None:
    """
    Run one generation request and report through post_message.

    Args:
        request: Request payload
        post_message: Receives every outgoing message
        should_abort: Polled between levels and tasks
        on_debug: Receives generator trace messages
    """
    request_type = request.get('type') if isinstance(request, dict) else None
    if request_type != 'generate':
        post_message(error_message(f"Unknown worker request type: {request_type}"))
        return

    abort_seen = False

    def abort_requested() -> bool:
        nonlocal abort_seen
        if should_abort and should_abort():
            abort_seen = True
        return abort_seen

    def report(percent: float, message: str) -> None:
        post_message(progress_message(percent * GENERATION_PROGRESS_SPAN / 100, message))

    try:
        params = parse_generation_params(request.get('params'))
        errors = validate_generation_params(params)
        if errors:
            post_message(error_message("; ".join(errors)))
            return

        post_message(progress_message(0, 'Starting toolpath generation...'))
        options = GenerationOptions(
            should_abort=abort_requested,
            on_progress=report,
            on_debug=on_debug
        )
        toolpath = generate_toolpath(params, options)

        post_message(progress_message(GENERATION_PROGRESS_SPAN, 'Calculating statistics...'))
        statistics = calculate_toolpath_statistics(toolpath, params)

        post_message(progress_message(100, 'Generation cancelled' if abort_seen else 'Generation complete'))
        post_message(complete_message(toolpath_to_dict(toolpath), statistics.to_dict(), abort_seen))
    except Exception as e:
        logger.exception("Toolpath generation failed")
        post_message(error_message(str(e)))
