import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Flask application configuration."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')

    # Database
    # Heroku uses postgres:// but SQLAlchemy requires postgresql://
    _database_url = os.environ.get('DATABASE_URL', 'sqlite:///facing.db')
    if _database_url.startswith('postgres://'):
        _database_url = _database_url.replace('postgres://', 'postgresql://', 1)
    SQLALCHEMY_DATABASE_URI = _database_url
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Authentication
    APP_PASSWORD = os.environ.get('APP_PASSWORD')  # None means no auth required
    SESSION_TIMEOUT_MINUTES = int(os.environ.get('SESSION_TIMEOUT_MINUTES', 480))  # 8 hours

    # Session security
    SESSION_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Toolpath jobs
    TOOLPATH_WORKERS = int(os.environ.get('TOOLPATH_WORKERS', 2))
    TOOLPATH_JOBS_SYNC = os.environ.get('TOOLPATH_JOBS_SYNC', '').lower() in ('1', 'true', 'yes')
    RECENT_JOBS_LIMIT = int(os.environ.get('RECENT_JOBS_LIMIT', 20))

    # G-code output defaults
    DEFAULT_TOOL_NUMBER = int(os.environ.get('DEFAULT_TOOL_NUMBER', 0))
    DEFAULT_WORKPLACE = int(os.environ.get('DEFAULT_WORKPLACE', 1))  # G54

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
