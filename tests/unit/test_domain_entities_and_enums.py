"""Tests for collection configuration entities and enums."""

from datetime import date

import pytest

from cms.domain.entities.collection import (
    AccessRules,
    CollectionConfig,
    CollectionHooks,
    DateField,
    ListField,
    NumberField,
    TextField,
    collection,
    field_from_dict,
)
from cms.domain.entities.record import RecordEntity
from cms.domain.enums import FieldType, Verb, verb_for_method


@pytest.mark.parametrize(
    ("method", "verb"),
    [
        ("GET", Verb.READ),
        ("head", Verb.READ),
        ("POST", Verb.CREATE),
        ("PUT", Verb.UPDATE),
        ("PATCH", Verb.UPDATE),
        ("DELETE", Verb.DELETE),
    ],
)
def test_verb_for_method(method: str, verb: Verb) -> None:
    assert verb_for_method(method) is verb


def test_verb_for_unknown_method_raises() -> None:
    with pytest.raises(ValueError):
        verb_for_method("OPTIONS")


def test_verb_values() -> None:
    assert Verb.values() == ["create", "read", "update", "delete"]


def test_field_from_dict_builds_variants() -> None:
    assert isinstance(field_from_dict("title", {"type": "text"}), TextField)
    assert isinstance(field_from_dict("n", {"type": "number"}), NumberField)
    spec = field_from_dict("tags", {"type": "list", "fields": {"name": {"type": "text"}}})
    assert isinstance(spec, ListField)
    assert spec.type is FieldType.LIST
    assert isinstance(spec.fields["name"], TextField)


def test_field_from_dict_unknown_type_raises() -> None:
    with pytest.raises(ValueError, match="unknown type"):
        field_from_dict("x", {"type": "richtext"})


def test_field_label_defaults_to_name() -> None:
    assert field_from_dict("title", {"type": "text"}).label == "title"


def test_default_values_are_json_ready_copies() -> None:
    """Date defaults render as ISO strings; mutable defaults are copied."""
    assert DateField(default=date(2024, 1, 2)).default_value() == "2024-01-02"
    tags = ListField(default=[{"name": "a"}])
    first = tags.default_value()
    first.append({"name": "b"})
    assert tags.default_value() == [{"name": "a"}]


def test_list_field_defaults_to_empty_list() -> None:
    spec = ListField()
    assert spec.has_default()
    assert spec.default_value() == []


def test_text_field_without_default() -> None:
    assert not TextField().has_default()


def test_access_rules_absent_verb_is_empty() -> None:
    rules = AccessRules.from_mapping({"read": ["public"]})
    assert rules.roles_for(Verb.READ) == frozenset({"public"})
    assert rules.roles_for(Verb.DELETE) == frozenset()


def test_access_rules_unknown_verb_raises() -> None:
    with pytest.raises(ValueError, match="Unknown access verb"):
        AccessRules.from_mapping({"publish": ["editor"]})


def test_access_rules_reject_string_role_list() -> None:
    """A bare string would otherwise become a set of single characters."""
    with pytest.raises(ValueError, match="must be a list"):
        AccessRules.from_mapping({"read": "public"})


def test_collection_builder() -> None:
    hook = lambda data: data  # noqa: E731
    cfg = collection(
        "posts",
        fields={"title": {"type": "text", "required": True}},
        access={"read": ["public"]},
        version=3,
        hooks={"before_create": hook},
    )
    assert cfg.label == "posts"
    assert cfg.version == 3
    assert cfg.fields["title"].required is True
    assert cfg.hooks.before_create is hook
    assert not cfg.is_schemaless


def test_collection_fields_are_read_only() -> None:
    cfg = collection("posts", fields={"title": {"type": "text"}})
    with pytest.raises(TypeError):
        cfg.fields["body"] = TextField()  # type: ignore[index]


@pytest.mark.parametrize("slug", ["", "Posts", "-posts", "po sts", "posts/1"])
def test_invalid_slug_rejected(slug: str) -> None:
    with pytest.raises(ValueError, match="Invalid collection slug"):
        CollectionConfig(slug=slug, label="x")


def test_negative_version_rejected() -> None:
    with pytest.raises(ValueError):
        CollectionConfig(slug="posts", label="Posts", version=-1)


def test_schemaless_collection() -> None:
    assert CollectionConfig(slug="notes", label="Notes").is_schemaless


def test_hooks_default_to_none() -> None:
    hooks = CollectionHooks()
    assert hooks.before_create is None
    assert hooks.new_version is None


def test_record_entity_state() -> None:
    record = RecordEntity(id="R1", collection="posts", version=1)
    assert not record.is_deleted
    assert record.is_stale(2)
    assert not record.is_stale(1)
