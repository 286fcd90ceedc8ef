"""Collection discovery: schemas of the collections the caller may read."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cms.api.v1.dependencies import get_current_principal_optional, get_registry
from cms.application.dtos.principal import Principal
from cms.application.services.access_control import evaluate
from cms.application.services.collection_registry import CollectionRegistry
from cms.domain.enums import Verb
from cms.schemas.collection import CollectionListResponse, CollectionResponse

router = APIRouter()


@router.get("", response_model=CollectionListResponse)
async def list_collections(
    registry: Annotated[CollectionRegistry, Depends(get_registry)],
    principal: Annotated[Principal | None, Depends(get_current_principal_optional)],
):
    """Return field schemas of every collection readable by the caller."""
    visible = [
        CollectionResponse.from_config(config)
        for config in registry
        if evaluate(Verb.READ, config, principal).allowed
    ]
    return CollectionListResponse(collections=visible)
