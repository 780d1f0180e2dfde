from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import jwt
from fastapi import Depends, Request, Response

from . import errors
from .auth import decode_token
from .config import Settings
from .deps import DbSession, SettingsDep
from .logger import get_logger
from .models import User

logger = get_logger(__name__)

NOT_AUTHORIZED = "Not authorized to access this route"


@dataclass(frozen=True)
class Identity:
    id: str
    email: str


def get_current_identity(request: Request, db: DbSession, settings: SettingsDep) -> Identity:
    token = request.cookies.get(settings.session_cookie)
    if not token:
        raise errors.Unauthorized(NOT_AUTHORIZED)

    try:
        payload = decode_token(token, settings)
    except jwt.PyJWTError as exc:
        logger.warning(f"Rejected session token: {exc}")
        raise errors.Unauthorized(NOT_AUTHORIZED)

    u = db.get(User, str(payload["sub"]))
    if u is None:
        # token outlived its user
        raise errors.Unauthorized(NOT_AUTHORIZED)
    return Identity(id=u.id, email=u.email)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


# cross-site SPA: the cookie must be SameSite=None, which browsers only accept with Secure
def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none",
        path="/",
        max_age=settings.session_ttl_seconds,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="none",
    )
