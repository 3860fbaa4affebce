"""Test configuration and fixtures."""
import copy

import pytest

from app import create_app
from facing.models import (
    CuttingParameters,
    FacingPattern,
    FeedRates,
    StockGeometry,
    ToolpathGenerationParams,
)
from web.extensions import db


class TestConfig:
    """Test configuration."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APP_PASSWORD = None  # Disable auth for tests
    TOOLPATH_JOBS_SYNC = True
    TOOLPATH_WORKERS = 1
    DEFAULT_TOOL_NUMBER = 0
    DEFAULT_WORKPLACE = 1
    RECENT_JOBS_LIMIT = 20
    LOG_LEVEL = 'WARNING'


class AuthTestConfig(TestConfig):
    """Test configuration with password auth enabled."""
    APP_PASSWORD = 'secret'


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def auth_app():
    """Application instance that requires a password."""
    app = create_app(AuthTestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def auth_client(auth_app):
    return auth_app.test_client()


def build_params(
    shape='rectangular',
    width=100.0,
    depth=100.0,
    diameter=None,
    origin_position='front-left',
    tool_radius=3.0,
    stepover=50.0,
    stepdown=3.0,
    total_depth=10.0,
    safe_z_height=5.0,
    z_offset=0.0,
    clear_stock_exit=True,
    finishing_pass=False,
    finishing_pass_height=0.0,
    finishing_pass_offset=0.0,
    pattern_type='rectilinear',
    angle=0.0,
    milling_direction='climb',
    spiral_segments_per_revolution=36,
    spiral_direction='outside-in',
    feed_xy=1000.0,
    feed_z=300.0,
    spindle_speed=12000.0
):
    """Build generation parameters with overridable defaults."""
    return ToolpathGenerationParams(
        stock=StockGeometry(
            shape=shape,
            width=width if shape == 'rectangular' else None,
            depth=depth if shape == 'rectangular' else None,
            diameter=diameter,
            height=20.0,
            origin_position=origin_position
        ),
        cutting=CuttingParameters(
            tool_radius=tool_radius,
            stepover=stepover,
            stepdown=stepdown,
            total_depth=total_depth,
            safe_z_height=safe_z_height,
            z_offset=z_offset,
            clear_stock_exit=clear_stock_exit,
            finishing_pass=finishing_pass,
            finishing_pass_height=finishing_pass_height,
            finishing_pass_offset=finishing_pass_offset
        ),
        pattern=FacingPattern(
            type=pattern_type,
            angle=angle,
            milling_direction=milling_direction,
            spiral_segments_per_revolution=spiral_segments_per_revolution,
            spiral_direction=spiral_direction
        ),
        feeds=FeedRates(xy=feed_xy, z=feed_z, spindle_speed=spindle_speed)
    )


@pytest.fixture
def make_params():
    """Factory for generation parameters."""
    return build_params


@pytest.fixture
def square_params():
    """100x100 square stock, 6mm tool at 50% stepover."""
    return build_params()


@pytest.fixture
def circular_params():
    """80mm round stock."""
    return build_params(shape='circular', diameter=80.0, origin_position='center-center')


SAMPLE_PAYLOAD = {
    'stock': {'shape': 'rectangular', 'width': 60.0, 'depth': 40.0, 'originPosition': 'front-left'},
    'cutting': {
        'toolRadius': 3.0,
        'stepover': 50.0,
        'stepdown': 1.0,
        'totalDepth': 2.0,
        'safeZHeight': 5.0,
    },
    'pattern': {'type': 'zigzag', 'angle': 0.0, 'millingDirection': 'climb'},
    'feeds': {'xy': 800.0, 'z': 200.0, 'spindleSpeed': 10000.0},
}


@pytest.fixture
def sample_payload():
    """camelCase request payload as sent by a client."""
    return copy.deepcopy(SAMPLE_PAYLOAD)
