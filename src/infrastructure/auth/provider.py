"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """Identity extracted from a verified bearer token."""

    id: UUID
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a bearer token.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create a signed token for a user (tests and local tooling)."""
        ...
