"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        ...

    async def get_by_email(self, email: str) -> Profile | None:
        """Get a profile by normalized email."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update a profile's email and name."""
        ...
