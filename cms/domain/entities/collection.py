"""Collection configuration domain entities.

A collection is declared once at startup (field schema, access rules,
schema version, singleton flag, lifecycle hooks) and never mutated
afterwards; every request shares the same frozen instances.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, ClassVar

from cms.domain.enums import FieldType, Verb

SLUG_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")

Label = str | Mapping[str, Any]


def _json_default(value: Any) -> Any:
    """Return a JSON-ready copy of a field default (dates become ISO-8601)."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return copy.deepcopy(value)


@dataclass(frozen=True)
class FieldSpec:
    """Base of the closed set of field variants. Discriminated by ``type``."""

    type: ClassVar[FieldType]

    label: Label = ""
    required: bool = False
    default: Any = None

    def has_default(self) -> bool:
        return self.default is not None

    def default_value(self) -> Any:
        """Return the JSON value written when the field is absent on create."""
        return _json_default(self.default)


@dataclass(frozen=True)
class TextField(FieldSpec):
    type: ClassVar[FieldType] = FieldType.TEXT


@dataclass(frozen=True)
class NumberField(FieldSpec):
    type: ClassVar[FieldType] = FieldType.NUMBER


@dataclass(frozen=True)
class DateField(FieldSpec):
    type: ClassVar[FieldType] = FieldType.DATE


@dataclass(frozen=True)
class DateTimeField(FieldSpec):
    type: ClassVar[FieldType] = FieldType.DATETIME


@dataclass(frozen=True)
class UploadField(FieldSpec):
    """Reference to a media object; the value is the blob key, never the bytes."""

    type: ClassVar[FieldType] = FieldType.UPLOAD


@dataclass(frozen=True)
class ListField(FieldSpec):
    """Repeated group of nested fields. Absent lists default to an empty list."""

    type: ClassVar[FieldType] = FieldType.LIST

    fields: Mapping[str, FieldSpec] = field(default_factory=dict)

    def has_default(self) -> bool:
        return True

    def default_value(self) -> Any:
        if self.default is None:
            return []
        return _json_default(self.default)


_FIELD_TYPES: dict[FieldType, type[FieldSpec]] = {
    FieldType.TEXT: TextField,
    FieldType.NUMBER: NumberField,
    FieldType.DATE: DateField,
    FieldType.DATETIME: DateTimeField,
    FieldType.LIST: ListField,
    FieldType.UPLOAD: UploadField,
}


def field_from_dict(name: str, spec: Mapping[str, Any] | FieldSpec) -> FieldSpec:
    """Build the FieldSpec variant for a declared field.

    Accepts an existing FieldSpec unchanged, or a mapping with a ``type`` tag
    plus optional label/required/default (and ``fields`` for lists).

    Raises:
        ValueError: If the type tag is missing or unknown.
    """
    if isinstance(spec, FieldSpec):
        return spec
    raw_type = spec.get("type")
    try:
        field_type = FieldType(raw_type)
    except ValueError:
        raise ValueError(f"Field {name!r} has unknown type {raw_type!r}") from None
    kwargs: dict[str, Any] = {
        "label": spec.get("label", name),
        "required": bool(spec.get("required", False)),
        "default": spec.get("default"),
    }
    if field_type is FieldType.LIST:
        nested = spec.get("fields") or {}
        kwargs["fields"] = MappingProxyType(
            {k: field_from_dict(f"{name}.{k}", v) for k, v in nested.items()}
        )
    return _FIELD_TYPES[field_type](**kwargs)


@dataclass(frozen=True)
class AccessRules:
    """Per-verb role table, built once from configuration and looked up generically."""

    roles: Mapping[Verb, frozenset[str]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_mapping(cls, access: Mapping[str, Iterable[str]] | None) -> AccessRules:
        """Build from ``{"read": ["public"], "update": ["editor"]}`` style config.

        Raises:
            ValueError: If a key is not a known verb or its roles are a bare string.
        """
        table: dict[Verb, frozenset[str]] = {}
        for key, roles in (access or {}).items():
            try:
                verb = Verb(key)
            except ValueError:
                raise ValueError(f"Unknown access verb {key!r}") from None
            if isinstance(roles, str):
                raise ValueError(
                    f"Roles for {key!r} must be a list of role names, got string {roles!r}"
                )
            table[verb] = frozenset(roles)
        return cls(MappingProxyType(table))

    def roles_for(self, verb: Verb) -> frozenset[str]:
        """Return the roles granted the verb; an absent list is empty."""
        return self.roles.get(verb, frozenset())


HookFn = Callable[..., Any | Awaitable[Any]]


@dataclass(frozen=True)
class CollectionHooks:
    """Optional lifecycle callbacks. Each may be sync or async.

    Signatures:
        before_create(data) -> data | None
        after_create(record)
        before_update(old_record, data) -> data | None
        after_update(old_record, new_record)
        before_delete(old_record)
        after_delete(old_record)
        new_version(old_record, old_version, new_version) -> data | None
    """

    before_create: HookFn | None = None
    after_create: HookFn | None = None
    before_update: HookFn | None = None
    after_update: HookFn | None = None
    before_delete: HookFn | None = None
    after_delete: HookFn | None = None
    new_version: HookFn | None = None


@dataclass(frozen=True)
class CollectionConfig:
    """Immutable configuration of one collection, identified by its slug."""

    slug: str
    label: Label
    fields: Mapping[str, FieldSpec] = field(
        default_factory=lambda: MappingProxyType({})
    )
    access: AccessRules = field(default_factory=AccessRules)
    unique: bool = False
    version: int = 0
    hooks: CollectionHooks = field(default_factory=CollectionHooks)

    def __post_init__(self) -> None:
        if not SLUG_RE.fullmatch(self.slug):
            raise ValueError(
                f"Invalid collection slug {self.slug!r}: use lowercase letters, digits, '-' and '_'"
            )
        if self.version < 0:
            raise ValueError(f"Collection {self.slug!r} version must be non-negative")

    @property
    def is_schemaless(self) -> bool:
        """True when no fields are declared; any payload keys are accepted."""
        return not self.fields


def collection(
    slug: str,
    *,
    label: Label | None = None,
    fields: Mapping[str, Mapping[str, Any] | FieldSpec] | None = None,
    access: Mapping[str, Iterable[str]] | None = None,
    unique: bool = False,
    version: int = 0,
    hooks: CollectionHooks | Mapping[str, HookFn] | None = None,
) -> CollectionConfig:
    """Build a CollectionConfig from plain configuration values.

    Example:
        posts = collection(
            "posts",
            fields={"title": {"type": "text", "required": True}},
            access={"read": ["public"], "create": ["editor"]},
            version=2,
            hooks={"new_version": add_slug},
        )
    """
    if hooks is None:
        hook_set = CollectionHooks()
    elif isinstance(hooks, CollectionHooks):
        hook_set = hooks
    else:
        hook_set = CollectionHooks(**hooks)
    return CollectionConfig(
        slug=slug,
        label=label if label is not None else slug,
        fields=MappingProxyType(
            {name: field_from_dict(name, spec) for name, spec in (fields or {}).items()}
        ),
        access=AccessRules.from_mapping(access),
        unique=unique,
        version=version,
        hooks=hook_set,
    )
