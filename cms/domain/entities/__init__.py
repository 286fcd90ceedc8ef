"""Domain entities: collection configuration and records."""

from cms.domain.entities.collection import (
    AccessRules,
    CollectionConfig,
    CollectionHooks,
    DateField,
    DateTimeField,
    FieldSpec,
    ListField,
    NumberField,
    TextField,
    UploadField,
    collection,
    field_from_dict,
)
from cms.domain.entities.record import RecordEntity

__all__ = [
    "AccessRules",
    "CollectionConfig",
    "CollectionHooks",
    "DateField",
    "DateTimeField",
    "FieldSpec",
    "ListField",
    "NumberField",
    "RecordEntity",
    "TextField",
    "UploadField",
    "collection",
    "field_from_dict",
]
