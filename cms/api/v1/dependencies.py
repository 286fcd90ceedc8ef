"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the collection registry, the record store,
the session resolver and the record service. Routes depend only on these
dependencies, not on infrastructure directly.

The record store is chosen by RECORD_BACKEND ('sql' or 'kv') and built once
per process; tests may place their own on app.state.record_store.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from cms.application.dtos.principal import Principal
from cms.application.interfaces.repositories import IRecordStore
from cms.application.interfaces.services import ISessionResolver
from cms.application.services.access_control import AccessControlService
from cms.application.services.collection_registry import CollectionRegistry
from cms.application.use_cases.records import RecordService
from cms.core.config import get_settings
from cms.domain.entities.collection import CollectionConfig
from cms.domain.enums import verb_for_method
from cms.infrastructure.record_store_factory import RecordStoreFactory
from cms.infrastructure.security.session_resolver import TokenSessionResolver
from cms.schemas.record import RecordWriteRequest

_http_bearer = HTTPBearer(auto_error=False)


def get_registry(request: Request) -> CollectionRegistry:
    """Process-wide collection registry built by create_app()."""
    return request.app.state.registry


def get_record_store(request: Request) -> IRecordStore:
    """Record store shared by all requests (created on first use if lifespan did not)."""
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        store = RecordStoreFactory.create_record_store(get_settings())
        request.app.state.record_store = store
    return store


def get_session_resolver(request: Request) -> ISessionResolver:
    """Session collaborator; defaults to bearer JWT verification."""
    resolver = getattr(request.app.state, "session_resolver", None)
    return resolver if resolver is not None else TokenSessionResolver()


def get_access_control(
    resolver: Annotated[ISessionResolver, Depends(get_session_resolver)],
) -> AccessControlService:
    return AccessControlService(resolver)


def get_record_service(
    registry: Annotated[CollectionRegistry, Depends(get_registry)],
    store: Annotated[IRecordStore, Depends(get_record_store)],
) -> RecordService:
    """Record service over the configured store (composition root)."""
    return RecordService(
        registry, store, default_limit=get_settings().list_default_limit
    )


def get_collection(
    slug: str,
    registry: Annotated[CollectionRegistry, Depends(get_registry)],
) -> CollectionConfig:
    """Resolve the path slug; unknown slugs are rejected (404) before any other work."""
    return registry.lookup(slug)


async def get_current_principal_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    resolver: Annotated[ISessionResolver, Depends(get_session_resolver)],
) -> Principal | None:
    """Return the principal for the bearer token if one is present and valid; else None."""
    if not credentials:
        return None
    return await resolver.resolve(credentials.credentials)


async def authorize_collection_request(
    request: Request,
    collection: Annotated[CollectionConfig, Depends(get_collection)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    access: Annotated[AccessControlService, Depends(get_access_control)],
) -> Principal | None:
    """Evaluate the collection's access rules for this request's verb.

    Runs after the slug lookup and before any storage access. Public verbs
    never touch the session resolver. Raises 401/403 via domain exceptions.
    """
    verb = verb_for_method(request.method)
    token = credentials.credentials if credentials else None
    return await access.authorize(verb, collection, token)


async def get_record_write_body(request: Request) -> RecordWriteRequest:
    """Parse ``{"data": {...}}`` from the request body.

    Declared after authorize_collection_request on write routes, so a
    malformed body from an unauthorized caller is still answered 401/403.
    """
    raw = await request.body()
    try:
        return RecordWriteRequest.model_validate_json(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e
