from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

SESSION_TTL_DEFAULT = 30 * 24 * 60 * 60  # 30d


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    database_url: str
    google_client_id: str | None = None
    jwt_alg: str = "HS256"
    session_cookie: str = "token"
    session_ttl_seconds: int = SESSION_TTL_DEFAULT
    cookie_secure: bool = True
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)
    pbkdf2_iters: int = 200000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv()

        secret = os.environ.get("JWT_SECRET", "").strip()
        if not secret:
            raise RuntimeError("JWT_SECRET is required")
        url = os.environ.get("DATABASE_URL", "").strip()
        if not url:
            raise RuntimeError("DATABASE_URL is required")

        origins = os.environ.get("CORS_ORIGINS", "http://localhost:5173")
        return cls(
            jwt_secret=secret,
            database_url=url,
            google_client_id=os.environ.get("GOOGLE_CLIENT_ID", "").strip() or None,
            session_cookie=os.environ.get("SESSION_COOKIE", "token"),
            session_ttl_seconds=int(os.environ.get("SESSION_TTL_SECONDS", str(SESSION_TTL_DEFAULT))),
            cookie_secure=_env_bool("COOKIE_SECURE", True),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            pbkdf2_iters=int(os.environ.get("PBKDF2_ITERS", "200000")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
