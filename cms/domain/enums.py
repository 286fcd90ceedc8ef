"""Domain enumerations for the CMS record engine.

Enums represent fixed sets of domain values (access verbs, field type tags).
"""

from enum import Enum

PUBLIC_ROLE = "public"
ADMIN_ROLE = "admin"
SINGLETON_RECORD_ID = "unique"


class Verb(str, Enum):
    """Access-controlled action on a collection.

    Each collection declares which roles may perform each verb.
    """

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def values(cls) -> list[str]:
        """Return all verb values as strings."""
        return [verb.value for verb in cls]


_METHOD_VERBS: dict[str, Verb] = {
    "GET": Verb.READ,
    "HEAD": Verb.READ,
    "POST": Verb.CREATE,
    "PUT": Verb.UPDATE,
    "PATCH": Verb.UPDATE,
    "DELETE": Verb.DELETE,
}


def verb_for_method(method: str) -> Verb:
    """Map an HTTP method to the verb it is authorized under.

    Raises:
        ValueError: If the method has no verb (e.g. OPTIONS).
    """
    try:
        return _METHOD_VERBS[method.upper()]
    except KeyError:
        raise ValueError(f"No access verb for HTTP method {method!r}") from None


class FieldType(str, Enum):
    """Type tag of a declared collection field (discriminator of FieldSpec)."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    LIST = "list"
    UPLOAD = "upload"
