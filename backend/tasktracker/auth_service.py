from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import errors
from .auth import hash_password, make_token, unusable_password_hash, verify_password
from .config import Settings
from .google_auth import IdentityVerifier
from .logger import get_logger
from .models import User

logger = get_logger(__name__)

# each separator must be followed by a word run, so there is only one way to match
EMAIL_REGEX = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$")
MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, db: Session, settings: Settings, verifier: IdentityVerifier | None = None):
        self.db = db
        self.settings = settings
        self.verifier = verifier

    def register(self, email: str, password: str) -> tuple[User, str]:
        if not email or len(email) > MAX_EMAIL_LENGTH or not EMAIL_REGEX.match(email):
            raise errors.ValidationError("Please add a valid email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise errors.ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        if self._find_by_email(email) is not None:
            raise errors.Conflict("User already exists")

        user = User(email=email, password_hash=hash_password(password, self.settings.pbkdf2_iters))
        self._insert(user)
        logger.info(f"User registered: {user.id}")
        return user, make_token(user.id, self.settings)

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self._find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise errors.Unauthorized("Invalid email or password")

        logger.info(f"User logged in: {user.id}")
        return user, make_token(user.id, self.settings)

    def google_login(self, token: str) -> tuple[User, str]:
        if self.verifier is None:
            raise errors.ExternalVerificationFailure("Google login is not configured")

        payload = self.verifier.verify(token)
        email = payload.get("email") if payload else None
        if not email:
            raise errors.ExternalVerificationFailure("Invalid Google Token")

        user = self._find_by_email(email)
        if user is None:
            # password login stays impossible for this account
            user = User(email=email, password_hash=unusable_password_hash(self.settings.pbkdf2_iters))
            self._insert(user)
            logger.info(f"User created from Google login: {user.id}")

        logger.info(f"User logged in with Google: {user.id}")
        return user, make_token(user.id, self.settings)

    def _find_by_email(self, email: str) -> User | None:
        return self.db.execute(select(User).where(User.email == email)).scalars().first()

    def _insert(self, user: User) -> None:
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError:
            # lost a race with a concurrent registration
            self.db.rollback()
            raise errors.Conflict("User already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating user: {e}")
            raise errors.InternalError(str(e)) from e
