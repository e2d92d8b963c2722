"""Socket.IO progress events shared by the controllers."""
from extensions import socketio


def emit_process(event: str, data: dict) -> None:
    """Emit process event to all connected clients (for live logs). Omit 'to' to send to everyone."""
    socketio.emit(event, data)
