"""Service interfaces (ports) consumed by the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cms.application.dtos.principal import Principal


class ISessionResolver(Protocol):
    """Protocol for the session collaborator (token -> principal)."""

    async def resolve(self, token: str) -> Principal | None:
        """Return the principal for a bearer token, or None if invalid or expired."""
