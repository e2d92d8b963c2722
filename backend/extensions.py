"""Shared Flask extensions (e.g. SocketIO) so controllers can emit without circular imports."""
from flask_socketio import SocketIO

# async_mode is chosen in create_app from config.SOCKETIO_ASYNC_MODE
socketio = SocketIO(cors_allowed_origins="*")
