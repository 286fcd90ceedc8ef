"""Record API: thin routes delegating to RecordService.

Every route runs authorize_collection_request first: unknown slug -> 404,
then the collection's access rules for the HTTP verb -> 401/403. Write
bodies are parsed only after that (422 on a malformed body).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from cms.api.v1.dependencies import (
    authorize_collection_request,
    get_record_service,
    get_record_write_body,
)
from cms.application.dtos.principal import Principal
from cms.application.use_cases.records import RecordService
from cms.core.limiter import limit_writes
from cms.schemas.record import (
    MessageResponse,
    RecordEnvelope,
    RecordListResponse,
    RecordMutationResponse,
    RecordResponse,
    RecordWriteRequest,
)

router = APIRouter()

Authorized = Annotated[Principal | None, Depends(authorize_collection_request)]
Records = Annotated[RecordService, Depends(get_record_service)]
WriteBody = Annotated[RecordWriteRequest, Depends(get_record_write_body)]

_WRITE_BODY_DOC = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": RecordWriteRequest.model_json_schema()}},
    }
}


@router.get("/{slug}", response_model=RecordListResponse)
async def list_records(
    slug: str,
    _: Authorized,
    record_svc: Records,
    cursor: Annotated[str | None, Query(description="Opaque cursor from the previous page")] = None,
    limit: Annotated[int | None, Query(ge=1, description="Page size (default 10)")] = None,
):
    """List live records of a collection, one page at a time."""
    page = await record_svc.list_records(slug, cursor=cursor, limit=limit)
    return RecordListResponse.from_page(page)


@router.get("/{slug}/{record_id}", response_model=RecordEnvelope)
async def get_record(
    slug: str,
    record_id: str,
    _: Authorized,
    record_svc: Records,
):
    """Return one live record (404 if absent or soft-deleted)."""
    record = await record_svc.get_record(slug, record_id)
    return RecordEnvelope(record=RecordResponse.from_entity(record))


@router.post(
    "/{slug}",
    response_model=RecordMutationResponse,
    status_code=201,
    openapi_extra=_WRITE_BODY_DOC,
)
@limit_writes
async def create_record(
    request: Request,
    slug: str,
    _: Authorized,
    body: WriteBody,
    record_svc: Records,
):
    """Create a record from ``{"data": {...}}``."""
    record = await record_svc.create_record(slug, body.data)
    return RecordMutationResponse(record=RecordResponse.from_entity(record))


@router.put(
    "/{slug}/{record_id}", response_model=RecordMutationResponse, openapi_extra=_WRITE_BODY_DOC
)
@limit_writes
async def update_record(
    request: Request,
    slug: str,
    record_id: str,
    _: Authorized,
    body: WriteBody,
    record_svc: Records,
):
    """Merge ``{"data": {...}}`` into the record (migrating stale payloads first)."""
    record = await record_svc.update_record(slug, record_id, body.data)
    return RecordMutationResponse(record=RecordResponse.from_entity(record))


@router.delete("/{slug}/{record_id}", response_model=MessageResponse)
@limit_writes
async def delete_record(
    request: Request,
    slug: str,
    record_id: str,
    _: Authorized,
    record_svc: Records,
):
    """Soft-delete a record. Deleting an already-deleted record returns 404."""
    await record_svc.delete_record(slug, record_id)
    return MessageResponse()
