from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .auth_routes import router as auth_router
from .config import Settings
from .db import get_engine
from .errors import register_exception_handlers
from .google_auth import GoogleIdentityVerifier, IdentityVerifier
from .logger import configure_logging, get_logger
from .models import Base
from .task_routes import router as task_router

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    verifier: IdentityVerifier | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if engine is None:
        engine = get_engine(settings.database_url)
    if verifier is None and settings.google_client_id:
        verifier = GoogleIdentityVerifier(settings.google_client_id)
    if verifier is None:
        logger.warning("GOOGLE_CLIENT_ID not set; Google login disabled")

    app = FastAPI(title="Task Tracker API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.verifier = verifier

    # the SPA runs on its own origin and sends the session cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(task_router)

    @app.on_event("startup")
    def _startup():
        Base.metadata.create_all(bind=engine)
        logger.info("Database schema ready")

    @app.get("/health")
    def health():
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            db_ok = True
        except SQLAlchemyError:
            db_ok = False
        return {"ok": True, "db": db_ok}

    @app.get("/healthz")
    async def healthz():
        # super cheap liveness probe
        return {"ok": True}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tasktracker.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "5000")),
    )
