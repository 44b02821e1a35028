"""
Admin Authorization

Decides whether a request is authorized as admin and mints tokens on
login. Routes depend on AdminAuthority; the token mechanics behind it
are a swappable BaseSessionStore.

Session Store Selection:
    - ADMIN_JWT_SECRET set → SignedSessionStore (survives restarts)
    - otherwise → InMemorySessionStore (process lifetime only)

Bypass Mode:
    In development, an empty ADMIN_PASSWORD or ALLOW_ANY_PASSWORD=1
    authorizes every login and every admin request.
"""

import logging
import secrets
from datetime import timedelta
from typing import Mapping, Optional

from app.core.config import Settings, get_settings
from app.core.errors import AuthError, InternalError
from app.core.normalize import normalize_password
from app.services.auth.base import BaseSessionStore
from app.services.auth.memory import InMemorySessionStore
from app.services.auth.signed import SignedSessionStore

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-admin-token"
BEARER_PREFIX = "bearer "


def extract_token(headers: Mapping[str, str]) -> str:
    """
    Read the admin token from request headers.

    ``X-Admin-Token`` wins over ``Authorization: Bearer <token>``.
    Header lookup must be case-insensitive (Starlette Headers are).
    """
    token = headers.get(TOKEN_HEADER)
    if token:
        return token.strip()
    auth = headers.get("authorization") or ""
    if auth.lower().startswith(BEARER_PREFIX):
        return auth[len(BEARER_PREFIX):].strip()
    return ""


def get_session_store(settings: Optional[Settings] = None) -> BaseSessionStore:
    """Build the configured session store."""
    settings = settings or get_settings()

    if settings.admin_jwt_secret:
        logger.info("Session Store: Using SignedSessionStore")
        return SignedSessionStore(
            settings.admin_jwt_secret,
            ttl=timedelta(days=settings.admin_token_ttl_days),
        )

    logger.info("Session Store: Using InMemorySessionStore")
    return InMemorySessionStore()


class AdminAuthority:
    """
    Admin login and request authorization.

    Example:
        >>> authority = AdminAuthority(settings, InMemorySessionStore())
        >>> token = authority.login("admin123")
        >>> authority.is_authorized({"x-admin-token": token})
        True
    """

    def __init__(self, settings: Settings, sessions: BaseSessionStore):
        self.sessions = sessions
        self._bypass = settings.admin_bypass
        self._expected = normalize_password(settings.admin_password)

    @property
    def bypass(self) -> bool:
        return self._bypass

    def login(self, password) -> str:
        """
        Exchange the admin password for a token.

        Raises:
            AuthError: wrong or empty password
            InternalError: no password configured outside bypass mode
        """
        if self._bypass:
            return self.sessions.issue()
        if not self._expected:
            raise InternalError("Admin auth is not configured")

        provided = normalize_password(password)
        if not provided or not secrets.compare_digest(
            provided.encode("utf-8"), self._expected.encode("utf-8")
        ):
            logger.warning("Admin login failed: invalid password")
            raise AuthError("Invalid password")

        logger.info("Admin login succeeded")
        return self.sessions.issue()

    def is_authorized(self, headers: Mapping[str, str]) -> bool:
        if self._bypass:
            return True
        return self.sessions.is_valid(extract_token(headers))

    def require_admin(self, headers: Mapping[str, str]) -> None:
        """Raise AuthError unless the request is authorized as admin."""
        if not self.is_authorized(headers):
            raise AuthError("Admin auth required")

    def logout(self, headers: Mapping[str, str]) -> None:
        token = extract_token(headers)
        if token:
            self.sessions.revoke(token)


__all__ = [
    "AdminAuthority",
    "extract_token",
    "get_session_store",
    "BaseSessionStore",
    "InMemorySessionStore",
    "SignedSessionStore",
]
