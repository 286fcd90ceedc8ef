"""Collection discovery schemas."""

from typing import Any

from pydantic import BaseModel

from cms.domain.entities.collection import CollectionConfig, FieldSpec, ListField


def _field_dict(spec: FieldSpec) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": spec.type.value,
        "label": spec.label,
        "required": spec.required,
        "default": spec.default_value() if spec.has_default() else None,
    }
    if isinstance(spec, ListField):
        out["fields"] = {name: _field_dict(f) for name, f in spec.fields.items()}
    return out


class CollectionResponse(BaseModel):
    """Public description of a collection (no access rules, no hooks)."""

    slug: str
    label: Any
    version: int
    unique: bool
    fields: dict[str, dict[str, Any]]

    @classmethod
    def from_config(cls, config: CollectionConfig) -> "CollectionResponse":
        return cls(
            slug=config.slug,
            label=config.label,
            version=config.version,
            unique=config.unique,
            fields={name: _field_dict(spec) for name, spec in config.fields.items()},
        )


class CollectionListResponse(BaseModel):
    collections: list[CollectionResponse]
