from __future__ import annotations

from typing import Annotated, Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .auth_service import AuthService
from .config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as s:
        yield s


SettingsDep = Annotated[Settings, Depends(get_settings)]
DbSession = Annotated[Session, Depends(get_db)]


def get_auth_service(request: Request, db: DbSession, settings: SettingsDep) -> AuthService:
    return AuthService(db, settings, request.app.state.verifier)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
