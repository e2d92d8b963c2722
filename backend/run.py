"""
Convenience script to run the API with Socket.IO progress events.
Run from project root: python backend/run.py
Or from backend: python run.py
"""
import os
import sys
from pathlib import Path

# eventlet must patch before Flask and SQLAlchemy are imported
if not os.environ.get("VERCEL") and os.getenv("SOCKETIO_ASYNC_MODE", "eventlet") == "eventlet":
    import eventlet
    eventlet.monkey_patch()

# Add backend to path when run from project root
backend_dir = Path(__file__).resolve().parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from app import create_app
from config.config import config
from extensions import socketio

if __name__ == "__main__":
    port = int(os.getenv("PORT", "1729"))
    print(f"[Server] Starting on port {port} (async_mode={config.SOCKETIO_ASYNC_MODE})")
    socketio.run(create_app(), host="0.0.0.0", port=port, debug=config.DEBUG)
