"""
In-Memory Session Store

Tokens live in a process-local set: restarting the server logs every
admin out. Used when ADMIN_JWT_SECRET is not configured.
"""

import logging
import uuid

from app.services.auth.base import BaseSessionStore

logger = logging.getLogger(__name__)


class InMemorySessionStore(BaseSessionStore):
    """Opaque ``adm_<uuid>`` tokens held in memory."""

    def __init__(self):
        self._tokens: set[str] = set()

    @property
    def backend_name(self) -> str:
        return "memory"

    def issue(self) -> str:
        token = f"adm_{uuid.uuid4()}"
        self._tokens.add(token)
        logger.debug(f"Issued admin token ({len(self._tokens)} active)")
        return token

    def is_valid(self, token: str) -> bool:
        return bool(token) and token in self._tokens

    def revoke(self, token: str) -> None:
        self._tokens.discard(token)
