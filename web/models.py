from datetime import datetime, UTC
import uuid

from web.extensions import db


JOB_STATUSES = ('pending', 'running', 'complete', 'cancelled', 'error')
FINISHED_STATUSES = ('complete', 'cancelled', 'error')


class ToolpathJob(db.Model):
    """One toolpath generation request and its result."""

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    status = db.Column(db.String(20), nullable=False, default='pending')
    progress = db.Column(db.Float, nullable=False, default=0.0)  # percent
    message = db.Column(db.String(200))

    # Generation parameters as snake_case JSON (see facing.params_parser)
    params = db.Column(db.JSON, nullable=False)

    # Result: list of levels, each a list of point dicts
    toolpath = db.Column(db.JSON, nullable=True)
    statistics = db.Column(db.JSON, nullable=True)
    error = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))
    modified_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    def to_dict(self, include_toolpath: bool = False):
        data = {
            'id': self.id,
            'status': self.status,
            'progress': self.progress,
            'message': self.message,
            'params': self.params,
            'statistics': self.statistics,
            'error': self.error,
            'level_count': len(self.toolpath) if self.toolpath else 0,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'modified_at': self.modified_at.isoformat() if self.modified_at else None
        }
        if include_toolpath:
            data['toolpath'] = self.toolpath
        return data
