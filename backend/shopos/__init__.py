# backend/shopos/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate, state_store



def create_app(test_config=None, persistence_factory=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    state_store.init_app(app, persistence_factory)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.state import state_bp
    from .routes.auth import auth_bp
    from .routes.dues import dues_bp
    from .routes.notifications import notifications_bp
    from .routes.products import products_bp
    from .routes.preferences import preferences_bp
    from .routes.backup import backup_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(state_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dues_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(preferences_bp)
    app.register_blueprint(backup_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
