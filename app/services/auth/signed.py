"""
Signed Session Store

Stateless admin tokens: HS256 JWTs asserting ``role=admin`` with a fixed
expiry. Tokens survive process restarts; validity depends only on the
signature, the expiry and the role claim. Revoked token ids are
remembered in memory for the life of the process.

Configuration:
    ADMIN_JWT_SECRET     signing secret (required)
    ADMIN_TOKEN_TTL_DAYS token lifetime, default 7
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.services.auth.base import BaseSessionStore

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ADMIN_ROLE = "admin"


class SignedSessionStore(BaseSessionStore):
    """JWT-backed session store."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError("A signing secret is required for signed admin tokens")
        self._secret = secret
        self._ttl = ttl
        self._revoked: set[str] = set()

    @property
    def backend_name(self) -> str:
        return "jwt"

    def issue(self) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "role": ADMIN_ROLE,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def _decode(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.debug(f"Rejected admin token: {e}")
            return None

    def is_valid(self, token: str) -> bool:
        if not token:
            return False
        claims = self._decode(token)
        if not claims or claims.get("role") != ADMIN_ROLE:
            return False
        return claims.get("jti") not in self._revoked

    def revoke(self, token: str) -> None:
        claims = self._decode(token) if token else None
        if claims and claims.get("jti"):
            self._revoked.add(claims["jti"])
