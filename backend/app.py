"""
Flask application entry point.
Run with: python app.py (so SocketIO uses eventlet for WebSocket support).
On Vercel (serverless), eventlet is skipped to avoid "RLock not greened" errors.
"""
import os

if __name__ == "__main__" and not os.environ.get("VERCEL") and os.getenv("SOCKETIO_ASYNC_MODE", "eventlet") == "eventlet":
    import eventlet
    eventlet.monkey_patch()

from flask import Flask
from flask_cors import CORS

from config.config import config
from config.db_config import DB_URL
from extensions import socketio
from models import db
from routes import api
from utils.error_handler import register_error_handlers


def create_app(overrides: dict | None = None):
    """Create and configure Flask app. overrides are applied on top of app.config (tests)."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["SQLALCHEMY_DATABASE_URI"] = DB_URL
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = 50 * 1024 * 1024  # 50 MB
    if overrides:
        app.config.update(overrides)

    origins = [
        "http://localhost:3000", "http://127.0.0.1:3000",
        "http://localhost:5173", "http://127.0.0.1:5173",
        "http://localhost:1729", "http://127.0.0.1:1729",
    ]
    CORS(app, origins=origins)

    db.init_app(app)
    socketio.init_app(app, async_mode=app.config.get("SOCKETIO_ASYNC_MODE", config.SOCKETIO_ASYNC_MODE))

    with app.app_context():
        db.create_all()

    app.register_blueprint(api)
    register_error_handlers(app)
    return app


if __name__ == "__main__":
    app = create_app()
    socketio.run(app, host="0.0.0.0", port=1729, debug=config.DEBUG)
