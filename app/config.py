"""
Application configuration from environment variables.

load_settings() reads the environment once at startup and returns an
immutable Settings; create_app stores it on app.state and handlers receive
it through the get_settings dependency. Missing required values raise
RuntimeError.
"""
import os
from dataclasses import dataclass, field
from urllib.parse import unquote

from fastapi import Request
from sqlalchemy.engine import URL


@dataclass(frozen=True)
class Settings:
    database_url: str
    google_client_id: str
    google_client_secret: str
    token_encryption_key: str
    # "postmessage" is what Google expects for codes obtained by the JS popup flow
    google_redirect_uri: str = "postmessage"
    firestore_project: str | None = None
    firestore_collection: str = "users"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3001
    skip_db_init: bool = False
    log_level: str = "INFO"
    env: str = "development"


def _flag(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in ("1", "true", "yes")


def _int_env(key: str, default: int) -> int:
    try:
        return max(1, int(os.getenv(key, str(default))))
    except ValueError:
        return default


def _required(key: str) -> str:
    val = os.getenv(key)
    if not val or not val.strip():
        raise RuntimeError(f"Required env var {key} is missing or empty")
    return val.strip()


def database_url_from_env() -> str:
    """
    DATABASE_URL wins when set. Otherwise build a Postgres URL from the
    PGHOST/PGDATABASE/PGUSER/PGPASSWORD parts; PGPASSWORD is stored
    percent-encoded in the environment and is decoded here.
    """
    url = os.getenv("DATABASE_URL")
    if url and url.strip():
        return url.strip()
    return URL.create(
        "postgresql+psycopg2",
        username=_required("PGUSER"),
        password=unquote(_required("PGPASSWORD")),
        host=_required("PGHOST"),
        port=_int_env("PGPORT", 5432),
        database=_required("PGDATABASE"),
        query={"sslmode": os.getenv("PGSSLMODE", "require")},
    ).render_as_string(hide_password=False)


def load_settings() -> Settings:
    origins = [o.strip().rstrip("/") for o in os.getenv("CORS_ORIGINS", "*").split(",")]
    return Settings(
        database_url=database_url_from_env(),
        google_client_id=_required("GOOGLE_CLIENT_ID"),
        google_client_secret=_required("GOOGLE_CLIENT_SECRET"),
        token_encryption_key=_required("TOKEN_ENCRYPTION_KEY"),
        google_redirect_uri=os.getenv("GOOGLE_REDIRECT_URI", "postmessage"),
        firestore_project=os.getenv("FIRESTORE_PROJECT") or None,
        firestore_collection=os.getenv("FIRESTORE_COLLECTION", "users"),
        cors_origins=[o for o in origins if o],
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 3001),
        skip_db_init=_flag("SKIP_DB_INIT"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        env=os.getenv("ENV", "development").lower(),
    )


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: the Settings the running app was created with."""
    return request.app.state.settings
