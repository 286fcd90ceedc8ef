"""Record API schemas. Record JSON uses camelCase keys (createdAt, updatedAt)."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cms.application.dtos.record import RecordPage
from cms.domain.entities.record import RecordEntity


class RecordWriteRequest(BaseModel):
    """Request body for create and update: ``{"data": {...}}``."""

    data: dict[str, Any] = Field(..., description="Record payload (field name -> value)")


class RecordResponse(BaseModel):
    """One live record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    collection: str
    data: dict[str, Any]
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, record: RecordEntity) -> "RecordResponse":
        return cls(
            id=record.id,
            collection=record.collection,
            data=record.data,
            version=record.version,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class RecordListResponse(BaseModel):
    """A page of records; ``cursor`` is null once the last page was returned."""

    records: list[RecordResponse]
    cursor: str | None = None

    @classmethod
    def from_page(cls, page: RecordPage) -> "RecordListResponse":
        return cls(
            records=[RecordResponse.from_entity(r) for r in page.records],
            cursor=page.cursor,
        )


class RecordEnvelope(BaseModel):
    record: RecordResponse


class MessageResponse(BaseModel):
    message: str = "OK"


class RecordMutationResponse(MessageResponse):
    """Create/update result: OK plus the record as written."""

    record: RecordResponse
