"""Access control: map (verb, collection policy, principal) to allow/deny.

Runs before any storage access for every record request. Fails closed: a
verb without a role list is open to admins only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cms.application.dtos.principal import Principal
from cms.application.interfaces.services import ISessionResolver
from cms.domain.entities.collection import CollectionConfig
from cms.domain.enums import PUBLIC_ROLE, Verb
from cms.domain.exceptions import AuthenticationException, AuthorizationException

logger = logging.getLogger(__name__)

REASON_PUBLIC = "public"
REASON_ADMIN = "admin"
REASON_ROLE = "role"
REASON_UNAUTHENTICATED = "unauthenticated"
REASON_FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class AccessDecision:
    """Transient allow/deny outcome with the rule that produced it."""

    allowed: bool
    reason: str

    @classmethod
    def allow(cls, reason: str) -> AccessDecision:
        return cls(True, reason)

    @classmethod
    def deny(cls, reason: str) -> AccessDecision:
        return cls(False, reason)


def is_public(verb: Verb, collection: CollectionConfig) -> bool:
    """Return True if the verb is open to unauthenticated callers."""
    return PUBLIC_ROLE in collection.access.roles_for(verb)


def evaluate(
    verb: Verb, collection: CollectionConfig, principal: Principal | None
) -> AccessDecision:
    """Decide whether principal (or an anonymous caller) may perform verb.

    Order: public role list, then session required, then admin bypass, then
    role intersection.
    """
    allowed_roles = collection.access.roles_for(verb)
    if PUBLIC_ROLE in allowed_roles:
        return AccessDecision.allow(REASON_PUBLIC)
    if principal is None:
        return AccessDecision.deny(REASON_UNAUTHENTICATED)
    if principal.is_admin:
        return AccessDecision.allow(REASON_ADMIN)
    if principal.roles & allowed_roles:
        return AccessDecision.allow(REASON_ROLE)
    return AccessDecision.deny(REASON_FORBIDDEN)


class AccessControlService:
    """Resolves the session only when the verb is not public, then evaluates."""

    def __init__(self, session_resolver: ISessionResolver) -> None:
        self.session_resolver = session_resolver

    async def authorize(
        self, verb: Verb, collection: CollectionConfig, token: str | None
    ) -> Principal | None:
        """Return the principal (None for public access) or raise.

        Raises:
            AuthenticationException: No valid session and the verb is not public.
            AuthorizationException: Principal lacks every allowed role.
        """
        if is_public(verb, collection):
            return None
        principal = await self.session_resolver.resolve(token) if token else None
        decision = evaluate(verb, collection, principal)
        if decision.allowed:
            return principal
        logger.debug(
            "Access denied: %s on %s (%s)", verb.value, collection.slug, decision.reason
        )
        if decision.reason == REASON_UNAUTHENTICATED:
            raise AuthenticationException()
        raise AuthorizationException(resource=collection.slug, action=verb.value)
