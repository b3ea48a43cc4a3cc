import logging
from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_socketio import SocketIO
from flask_wtf.csrf import CSRFProtect
from config import Config

socketio = SocketIO()
csrf = CSRFProtect()
bcrypt = Bcrypt()


def create_app(config_class=Config, repository=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    csrf.init_app(app)
    bcrypt.init_app(app)

    # Initialize Firebase
    if app.config.get('FIREBASE_ENABLED', True):
        from app.firebase_init import init_firebase
        init_firebase(app.config)

    if repository is None:
        from app import firestore_dao as repository
    app.extensions['dashboard_repository'] = repository

    # CORS origins
    allowed_origins = []
    cors_origins = app.config.get('CORS_ALLOWED_ORIGINS', '')
    if cors_origins:
        for origin in cors_origins.split(','):
            origin = origin.strip()
            if origin:
                allowed_origins.append(origin)

    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins if allowed_origins else None,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading')
    )

    from app.errors import DashboardError

    @app.errorhandler(DashboardError)
    def handle_dashboard_error(error):
        return jsonify(error.to_dict()), error.status_code

    # Register blueprints
    from app.routes import auth, dashboard, profile, theme, upload
    app.register_blueprint(auth.bp)
    app.register_blueprint(dashboard.bp)
    app.register_blueprint(profile.bp)
    app.register_blueprint(theme.bp)
    app.register_blueprint(upload.bp)

    from app import events  # noqa: F401

    return app
