from __future__ import annotations

from fastapi import APIRouter, Response, status

from .deps import AuthServiceDep, SettingsDep
from .schemas import AuthIn, GoogleAuthIn, MessageOut, UserOut
from .session_deps import CurrentIdentity, clear_session_cookie, set_session_cookie

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserOut)
def register(body: AuthIn, response: Response, service: AuthServiceDep, settings: SettingsDep):
    user, token = service.register(body.email, body.password)
    set_session_cookie(response, token, settings)
    return UserOut(id=user.id, email=user.email)


@router.post("/login", response_model=UserOut)
def login(body: AuthIn, response: Response, service: AuthServiceDep, settings: SettingsDep):
    user, token = service.login(body.email, body.password)
    set_session_cookie(response, token, settings)
    return UserOut(id=user.id, email=user.email)


@router.post("/google", response_model=UserOut)
def google_login(body: GoogleAuthIn, response: Response, service: AuthServiceDep, settings: SettingsDep):
    user, token = service.google_login(body.id_token)
    set_session_cookie(response, token, settings)
    return UserOut(id=user.id, email=user.email)


@router.get("/logout", response_model=MessageOut)
def logout(response: Response, settings: SettingsDep):
    """Only tells the browser to drop the cookie; issued tokens stay valid until they expire."""
    clear_session_cookie(response, settings)
    return MessageOut(message="Logged out")


@router.get("/me", response_model=UserOut)
def me(identity: CurrentIdentity):
    return UserOut(id=identity.id, email=identity.email)
