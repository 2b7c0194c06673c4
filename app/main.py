"""
Booking backend: bookings CRUD plus a Google Calendar bridge.

create_app builds the FastAPI app from Settings (loaded from the environment,
with .env in development only). The lifespan owns the database engine: it is
created at startup, tables are created unless SKIP_DB_INIT, and the pool is
disposed on shutdown. Run with `python main.py` or
`uvicorn main:create_app --factory`.
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from google.cloud import firestore
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, load_settings
from crypto import TokenCipher
from database import Base, create_db_engine, create_session_factory, log_server_version
from bookings import router as bookings_router
from google_calendar import router as calendar_router
from services.token_store import TokenStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = create_db_engine(settings.database_url)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    # Production uses migrations and sets SKIP_DB_INIT
    if not settings.skip_db_init:
        Base.metadata.create_all(bind=engine)
    log_server_version(engine)
    try:
        yield
    finally:
        engine.dispose()
        logger.info("Database pool closed")


def create_app(settings: Settings | None = None, firestore_client=None) -> FastAPI:
    """
    Build the app. Tests pass their own Settings and a Firestore stand-in;
    otherwise settings come from the environment and the Firestore client
    from Application Default Credentials.
    """
    if settings is None:
        # Load .env only in development; production should set env vars directly
        if os.getenv("ENV", "development").lower() == "development":
            load_dotenv(Path(__file__).resolve().parent.parent / ".env")
        settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if firestore_client is None:
        firestore_client = firestore.Client(project=settings.firestore_project)

    app = FastAPI(
        title="Booking Backend",
        description="Bookings CRUD and Google Calendar bridge.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_store = TokenStore(
        firestore_client,
        TokenCipher(settings.token_encryption_key),
        collection=settings.firestore_collection,
    )

    # Credentials are not used (no cookies), so "*" is allowed here
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Data-access fault: log with stack trace, generic 500."""
        logger.error("Error executing query", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions; log and return generic 500. Never leak stack traces."""
        logger.error("Unhandled exception: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "If you see this, the API is working!"

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(bookings_router)
    app.include_router(calendar_router)
    return app


if __name__ == "__main__":
    app = create_app()
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
