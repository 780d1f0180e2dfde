from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


def get_engine(url: str) -> Engine:
    if not url:
        raise RuntimeError("DATABASE_URL is required")
    kwargs: dict = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # the app serves requests from a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)
