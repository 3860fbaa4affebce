"""Toolpath job service.

Runs generation requests through the worker protocol on a thread pool and
records progress and results on ToolpathJob rows.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, UTC
from typing import Dict, List, Optional

from flask import current_app

from facing.params_parser import ParseError, parse_generation_params, params_to_dict
from facing.utils.validators import validate_generation_params
from facing.worker import handle_worker_request
from web.extensions import db
from web.models import ToolpathJob

logger = logging.getLogger(__name__)


class ToolpathService:
    """Service for creating, tracking and cancelling toolpath jobs."""

    _executor: Optional[ThreadPoolExecutor] = None
    _lock = threading.Lock()
    _abort_events: Dict[str, threading.Event] = {}

    @staticmethod
    def validate(data: Dict) -> List[str]:
        """Validate a raw parameter payload. Returns error messages."""
        try:
            params = parse_generation_params(data)
        except ParseError as e:
            return [str(e)]
        return validate_generation_params(params)

    @staticmethod
    def get(job_id: str) -> Optional[ToolpathJob]:
        """Get a single job by UUID."""
        return db.session.get(ToolpathJob, job_id)

    @staticmethod
    def _get_executor(max_workers: int) -> ThreadPoolExecutor:
        with ToolpathService._lock:
            if ToolpathService._executor is None:
                ToolpathService._executor = ThreadPoolExecutor(
                    max_workers=max_workers, thread_name_prefix='toolpath'
                )
            return ToolpathService._executor

    @staticmethod
    def create_job(data: Dict) -> ToolpathJob:
        """
        Store a new job and start generating it.

        With TOOLPATH_JOBS_SYNC the job runs before this returns.

        Raises:
            ParseError: If the payload cannot be parsed
        """
        params = parse_generation_params(data)
        job = ToolpathJob(params=params_to_dict(params), status='pending', progress=0.0)
        db.session.add(job)
        db.session.commit()

        job_id = job.id
        abort_event = threading.Event()
        with ToolpathService._lock:
            ToolpathService._abort_events[job_id] = abort_event

        request = {'type': 'generate', 'params': job.params}
        app = current_app._get_current_object()
        logger.info("Job %s queued (%s pattern)", job_id, params.pattern.type)

        if app.config.get('TOOLPATH_JOBS_SYNC'):
            ToolpathService._execute(job_id, request, abort_event)
        else:
            executor = ToolpathService._get_executor(app.config.get('TOOLPATH_WORKERS', 2))
            executor.submit(ToolpathService._run_job, app, job_id, request, abort_event)

        return job

    @staticmethod
    def _run_job(app, job_id: str, request: Dict, abort_event: threading.Event) -> None:
        with app.app_context():
            ToolpathService._execute(job_id, request, abort_event)

    @staticmethod
    def _execute(job_id: str, request: Dict, abort_event: threading.Event) -> None:
        logger.info("Job %s started", job_id)
        try:
            handle_worker_request(
                request,
                lambda message: ToolpathService.apply_message(job_id, message),
                should_abort=abort_event.is_set,
                on_debug=lambda text: logger.debug("Job %s: %s", job_id, text)
            )
        finally:
            with ToolpathService._lock:
                ToolpathService._abort_events.pop(job_id, None)

    @staticmethod
    def apply_message(job_id: str, message: Dict) -> Optional[ToolpathJob]:
        """
        Record a worker message on its job.

        Raises:
            ValueError: If the message type is unknown
        """
        job = ToolpathService.get(job_id)
        if not job:
            return None

        message_type = message.get('type')
        if message_type == 'progress':
            job.status = 'running'
            job.progress = message.get('progress', job.progress)
            job.message = message.get('message')
        elif message_type == 'complete':
            job.toolpath = message.get('toolpath')
            job.statistics = message.get('statistics')
            job.progress = 100.0
            job.status = 'cancelled' if message.get('cancelled') else 'complete'
            logger.info("Job %s %s with %d levels", job_id, job.status, len(job.toolpath or []))
        elif message_type == 'error':
            job.status = 'error'
            job.error = message.get('error')
            logger.warning("Job %s failed: %s", job_id, job.error)
        else:
            raise ValueError(f"Unknown worker message type: {message_type}")

        job.modified_at = datetime.now(UTC)
        db.session.commit()
        return job

    @staticmethod
    def cancel(job_id: str) -> Optional[ToolpathJob]:
        """
        Ask a running job to stop after its current task.

        Levels finished before the abort are kept.
        """
        job = ToolpathService.get(job_id)
        if not job:
            return None

        with ToolpathService._lock:
            abort_event = ToolpathService._abort_events.get(job_id)

        if abort_event:
            abort_event.set()
            logger.info("Job %s cancellation requested", job_id)
        elif not job.is_finished:
            # No worker owns it any more
            job.status = 'cancelled'
            job.modified_at = datetime.now(UTC)
            db.session.commit()
        return job
