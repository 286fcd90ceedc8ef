"""Domain exceptions for the CMS record engine.

Defines domain-level exceptions that represent request failures of the
record engine (unknown collection, access denial, hook rejection, storage
failure). These exceptions are independent of infrastructure concerns.
Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CmsException(Exception):
    """Base exception for all CMS application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error envelope: error message, code and details."""
        return {
            "error": self.message,
            "code": self.error_code,
            "details": self.details,
        }


class ValidationException(CmsException):
    """Raised when input validation fails (malformed body, undeclared or missing field)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CmsException):
    """Raised when a request needs a principal and no valid session was presented."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(CmsException):
    """Raised when the principal's roles do not grant the verb on the collection."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Forbidden",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional collection slug.
            action: Optional verb that was attempted (e.g. 'create', 'read').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Forbidden: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(CmsException):
    """Raised when a collection or record is unknown, or the record is soft-deleted."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'collection', 'record').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RecordConflictException(CmsException):
    """Raised when inserting at a key that already holds a live record."""

    def __init__(self, slug: str, record_id: str) -> None:
        super().__init__(
            f"Record already exists: {slug}/{record_id}",
            "RECORD_CONFLICT",
            {"collection": slug, "record_id": record_id},
        )


class HookRejectedException(CmsException):
    """Raised when a pre-mutation or migration hook fails; nothing was written.

    The hook's own error message is carried in details["reason"].
    """

    def __init__(self, slug: str, hook: str, reason: str) -> None:
        """Initialize with collection, hook name and the hook's error detail.

        Args:
            slug: Collection whose hook rejected the operation.
            hook: Hook name (e.g. 'before_update', 'new_version').
            reason: Error detail raised by the hook.
        """
        super().__init__(
            f"{hook} hook rejected the operation: {reason}",
            "HOOK_REJECTED",
            {"collection": slug, "hook": hook, "reason": reason},
        )


class HookFailedException(CmsException):
    """Raised when a post-mutation hook fails after the write was committed.

    The write is not rolled back. record_id names the committed record so
    callers can reconcile.
    """

    def __init__(self, slug: str, hook: str, record_id: str, reason: str) -> None:
        super().__init__(
            f"{hook} hook failed after the write was committed: {reason}",
            "HOOK_FAILED",
            {
                "collection": slug,
                "hook": hook,
                "record_id": record_id,
                "reason": reason,
                "committed": True,
            },
        )
        self.record_id = record_id


class StorageException(CmsException):
    """Raised when a backing-store call fails; the in-flight operation is aborted."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Storage error during {operation}",
            "STORAGE_ERROR",
            {"operation": operation, "reason": reason},
        )


class RecordStoreNotConfiguredException(CmsException):
    """Raised when the configured record backend cannot be built."""

    def __init__(self, backend: str) -> None:
        super().__init__(
            message=f"Record store backend is not configured: {backend}",
            error_code="SERVICE_UNAVAILABLE",
            details={"backend": backend},
        )
