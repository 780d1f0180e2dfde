from __future__ import annotations

from typing import Any, Mapping, Protocol

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from . import errors
from .logger import get_logger

logger = get_logger(__name__)


class IdentityVerifier(Protocol):
    def verify(self, token: str) -> Mapping[str, Any]: ...


class GoogleIdentityVerifier:
    """Checks a Google-issued ID token's signature, issuer and audience."""

    def __init__(self, client_id: str):
        self.client_id = client_id
        self._request = google_requests.Request()

    def verify(self, token: str) -> Mapping[str, Any]:
        try:
            return id_token.verify_oauth2_token(token, self._request, self.client_id)
        except google_exceptions.TransportError:
            # cert fetch failed; surfaces as a server error
            raise
        except (ValueError, google_exceptions.GoogleAuthError) as exc:
            logger.warning(f"Google ID token rejected: {exc}")
            raise errors.ExternalVerificationFailure("Invalid Google Token") from exc
