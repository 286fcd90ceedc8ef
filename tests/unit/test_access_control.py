"""Access control decision and AccessControlService tests."""

from unittest.mock import AsyncMock

import pytest

from cms.application.dtos.principal import Principal
from cms.application.services.access_control import (
    REASON_ADMIN,
    REASON_FORBIDDEN,
    REASON_PUBLIC,
    REASON_ROLE,
    REASON_UNAUTHENTICATED,
    AccessControlService,
    evaluate,
    is_public,
)
from cms.domain.entities.collection import collection
from cms.domain.enums import Verb
from cms.domain.exceptions import AuthenticationException, AuthorizationException

POSTS = collection(
    "posts",
    access={"read": ["public"], "create": ["editor"], "update": ["editor", "author"]},
)
SECRETS = collection("secrets", access={"read": ["admin"]})

EDITOR = Principal(id="u1", roles=frozenset({"editor"}))
ADMIN = Principal(id="u2", roles=frozenset({"admin"}))
MEMBER = Principal(id="u3", roles=frozenset({"member"}))


def test_public_verb_allows_anonymous() -> None:
    assert is_public(Verb.READ, POSTS)
    assert evaluate(Verb.READ, POSTS, None).reason == REASON_PUBLIC


def test_non_public_verb_requires_session() -> None:
    decision = evaluate(Verb.CREATE, POSTS, None)
    assert not decision.allowed
    assert decision.reason == REASON_UNAUTHENTICATED


def test_role_intersection_allows() -> None:
    decision = evaluate(Verb.UPDATE, POSTS, EDITOR)
    assert decision.allowed
    assert decision.reason == REASON_ROLE


def test_admin_bypasses_role_lists() -> None:
    """Admins are allowed even for verbs with no role list."""
    assert evaluate(Verb.DELETE, POSTS, ADMIN).reason == REASON_ADMIN


def test_missing_role_list_denies_non_admin() -> None:
    decision = evaluate(Verb.DELETE, POSTS, EDITOR)
    assert not decision.allowed
    assert decision.reason == REASON_FORBIDDEN


def test_secrets_read_forbidden_for_non_admin() -> None:
    assert not evaluate(Verb.READ, SECRETS, MEMBER).allowed
    assert evaluate(Verb.READ, SECRETS, ADMIN).allowed


async def test_authorize_public_never_resolves_session() -> None:
    resolver = AsyncMock()
    service = AccessControlService(resolver)
    assert await service.authorize(Verb.READ, POSTS, "some-token") is None
    resolver.resolve.assert_not_called()


async def test_authorize_without_token_raises_authentication() -> None:
    resolver = AsyncMock()
    service = AccessControlService(resolver)
    with pytest.raises(AuthenticationException):
        await service.authorize(Verb.CREATE, POSTS, None)
    resolver.resolve.assert_not_called()


async def test_authorize_invalid_token_raises_authentication() -> None:
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=None)
    service = AccessControlService(resolver)
    with pytest.raises(AuthenticationException):
        await service.authorize(Verb.CREATE, POSTS, "bad")


async def test_authorize_wrong_role_raises_authorization() -> None:
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=MEMBER)
    service = AccessControlService(resolver)
    with pytest.raises(AuthorizationException) as exc_info:
        await service.authorize(Verb.READ, SECRETS, "t")
    assert exc_info.value.details == {"resource": "secrets", "action": "read"}


async def test_authorize_returns_principal() -> None:
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=EDITOR)
    service = AccessControlService(resolver)
    assert await service.authorize(Verb.CREATE, POSTS, "t") is EDITOR
    resolver.resolve.assert_awaited_once_with("t")
