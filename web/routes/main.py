"""Main routes - home, login, logout."""
from flask import Blueprint, current_app, request, redirect, url_for

from facing.models import MILLING_DIRECTIONS, PATTERN_TYPES, SPIRAL_DIRECTIONS, STOCK_SHAPES
from web.auth import login_required, authenticate, logout as auth_logout
from web.extensions import db
from web.models import JOB_STATUSES, ToolpathJob
from web.utils.responses import success_response, error_response

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
@login_required
def index():
    """Home - supported options and recent jobs."""
    limit = current_app.config.get('RECENT_JOBS_LIMIT', 20)
    jobs = db.session.execute(
        db.select(ToolpathJob).order_by(ToolpathJob.created_at.desc()).limit(limit)
    ).scalars().all()

    return success_response(data={
        'patterns': list(PATTERN_TYPES),
        'stock_shapes': list(STOCK_SHAPES),
        'milling_directions': list(MILLING_DIRECTIONS),
        'spiral_directions': list(SPIRAL_DIRECTIONS),
        'job_statuses': list(JOB_STATUSES),
        'jobs': [job.to_dict() for job in jobs]
    })


@main_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login with the application password (form or JSON body)."""
    if request.method == 'GET':
        return success_response(data={'password_required': bool(current_app.config.get('APP_PASSWORD'))})

    data = request.get_json(silent=True) or {}
    password = request.form.get('password') or data.get('password', '')
    if authenticate(password):
        next_url = request.args.get('next')
        if next_url:
            return redirect(next_url)
        return success_response(message='Logged in')
    return error_response('Invalid password', 401)


@main_bp.route('/logout')
def logout():
    """Logout and redirect to login."""
    auth_logout()
    return redirect(url_for('main.login'))
