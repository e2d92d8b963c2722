"""
Database configuration.
DATABASE_URL wins (Supabase/PostgreSQL, or sqlite:/// for local runs);
otherwise the URL is built from DB_* components.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def normalize_database_url(url: str) -> str:
    """postgres:// -> postgresql://, and require SSL for hosted PostgreSQL."""
    if url.startswith("sqlite"):
        return url
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if "sslmode" not in url and os.getenv("DB_SSLMODE", "require") != "disable":
        url += "&sslmode=require" if "?" in url else "?sslmode=require"
    return url


def get_database_url():
    """Build the SQLAlchemy connection URL for the well-state store."""
    url = os.getenv("DATABASE_URL") or os.getenv("SUPABASE_DB_URL")
    if url:
        return normalize_database_url(url)
    db_user = os.getenv("DB_USER", "postgres")
    db_password = os.getenv("DB_PASSWORD", "postgres")
    db_host = os.getenv("DB_HOST", "localhost")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME", "well_interventions")
    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


DB_URL = get_database_url()
