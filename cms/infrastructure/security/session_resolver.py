"""Session resolver (implements ISessionResolver) backed by bearer JWTs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from cms.application.dtos.principal import Principal
from cms.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)


def _roles(claim: Any) -> frozenset[str]:
    """Accept a list of roles or the comma-separated form stored on users."""
    if not claim:
        return frozenset()
    if isinstance(claim, str):
        return frozenset(r.strip() for r in claim.split(",") if r.strip())
    if isinstance(claim, Iterable):
        return frozenset(str(r) for r in claim)
    return frozenset()


class TokenSessionResolver:
    """Builds the Principal from verified token claims; invalid tokens yield None."""

    async def resolve(self, token: str) -> Principal | None:
        try:
            payload = verify_token(token)
        except ValueError as e:
            logger.debug("Rejected bearer token: %s", e)
            return None
        config = payload.get("config")
        return Principal(
            id=str(payload["sub"]),
            roles=_roles(payload.get("roles")),
            name=payload.get("name", ""),
            email=payload.get("email", ""),
            config=config if isinstance(config, dict) else {},
        )
