"""
Application configuration module.
Loads environment variables and provides centralized config.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from backend/ or project root
base = Path(__file__).resolve().parent.parent
load_dotenv(base / ".env")
load_dotenv(base.parent / ".env")


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    """Base configuration."""
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    DEBUG = _flag("FLASK_DEBUG")
    ENV = os.getenv("FLASK_ENV", "development")
    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    # longest block sent to the model, in characters
    MAX_BLOCK_CHARS = int(os.getenv("MAX_BLOCK_CHARS", "6000"))
    # reject intervals whose declared unit is not meters instead of forcing "m"
    STRICT_DEPTH_UNITS = _flag("STRICT_DEPTH_UNITS")
    CLOSURE_TOLERANCE = float(os.getenv("CLOSURE_TOLERANCE", "0"))
    # Use threading on Vercel (serverless); eventlet elsewhere for WebSockets
    SOCKETIO_ASYNC_MODE = os.getenv("SOCKETIO_ASYNC_MODE") or ("threading" if os.environ.get("VERCEL") else "eventlet")


# Config instance for app
config = Config()
