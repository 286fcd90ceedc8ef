"""Principal DTO: the authenticated caller as seen by the record engine."""

from dataclasses import dataclass, field
from typing import Any

from cms.domain.enums import ADMIN_ROLE


@dataclass(frozen=True)
class Principal:
    """Authenticated user context (read-only; owned by the auth collaborator)."""

    id: str
    roles: frozenset[str] = frozenset()
    name: str = ""
    email: str = ""
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles
