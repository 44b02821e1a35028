"""
Session Store Abstract Base Class

Admin sessions are opaque tokens. A session store mints them on login,
answers whether a presented token is still valid, and revokes them on
logout. The HTTP layer only talks to this interface.
"""

from abc import ABC, abstractmethod


class BaseSessionStore(ABC):
    """Abstract base class for admin session stores."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier used in startup logs."""
        pass

    @abstractmethod
    def issue(self) -> str:
        """Mint a new, unique admin token."""
        pass

    @abstractmethod
    def is_valid(self, token: str) -> bool:
        """Check whether a token is currently valid."""
        pass

    @abstractmethod
    def revoke(self, token: str) -> None:
        """Invalidate a token. Unknown tokens are ignored."""
        pass
