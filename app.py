import logging

from flask import Flask
from flask_cors import CORS

from config import Config
from web.extensions import db, migrate


def create_app(config_class=Config):
    """Application factory for creating Flask app instances."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Configure CORS - allow same origin by default
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # Import and register blueprints inside factory to avoid circular imports
    from web.routes.main import main_bp
    from web.routes.api import api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.cli.command('init-db')
    def init_db():
        """Create database tables when not using migrations."""
        db.create_all()
        print("Database tables created")

    return app


# Create app instance for gunicorn and flask CLI
app = create_app()

if __name__ == '__main__':
    app.run(debug=True, port=5001)
