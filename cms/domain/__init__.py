"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from cms.domain.entities import CollectionConfig, RecordEntity, collection
from cms.domain.enums import ADMIN_ROLE, PUBLIC_ROLE, SINGLETON_RECORD_ID, FieldType, Verb
from cms.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CmsException,
    HookFailedException,
    HookRejectedException,
    RecordConflictException,
    ResourceNotFoundException,
    StorageException,
    ValidationException,
)

__all__ = [
    # Entities
    "CollectionConfig",
    "RecordEntity",
    "collection",
    # Enums
    "ADMIN_ROLE",
    "FieldType",
    "PUBLIC_ROLE",
    "SINGLETON_RECORD_ID",
    "Verb",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CmsException",
    "HookFailedException",
    "HookRejectedException",
    "RecordConflictException",
    "ResourceNotFoundException",
    "StorageException",
    "ValidationException",
]
