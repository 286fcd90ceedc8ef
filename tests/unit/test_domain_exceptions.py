"""Tests for domain exceptions (error_code, message, details)."""

from cms.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CmsException,
    HookFailedException,
    HookRejectedException,
    RecordConflictException,
    RecordStoreNotConfiguredException,
    ResourceNotFoundException,
    StorageException,
    ValidationException,
)


def test_cms_exception_custom_error_code_and_details() -> None:
    """CmsException accepts custom error_code and details."""
    exc = CmsException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.message == "Oops"
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}


def test_to_dict_is_error_envelope() -> None:
    exc = ValidationException("Invalid", field="title")
    assert exc.to_dict() == {
        "error": "Invalid",
        "code": "VALIDATION_ERROR",
        "details": {"field": "title"},
    }


def test_validation_exception_without_field() -> None:
    """ValidationException with no field has empty details."""
    exc = ValidationException("Invalid")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Unauthorized"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_with_resource_and_action() -> None:
    """AuthorizationException formats message when resource and action given."""
    exc = AuthorizationException(resource="secrets", action="read")
    assert exc.message == "Forbidden: read on secrets"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "secrets", "action": "read"}


def test_authorization_exception_default_message() -> None:
    exc = AuthorizationException()
    assert exc.message == "Forbidden"
    assert exc.details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("record", "01ABC")
    assert "01ABC" in exc.message
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "record", "resource_id": "01ABC"}


def test_record_conflict_exception() -> None:
    exc = RecordConflictException("settings", "unique")
    assert exc.error_code == "RECORD_CONFLICT"
    assert exc.details["collection"] == "settings"


def test_hook_rejected_exception_carries_reason() -> None:
    exc = HookRejectedException("posts", "before_create", "title is banned")
    assert exc.error_code == "HOOK_REJECTED"
    assert exc.details["reason"] == "title is banned"
    assert "before_create" in exc.message


def test_hook_failed_exception_reports_committed_record() -> None:
    """HookFailedException names the committed record id."""
    exc = HookFailedException("posts", "after_create", "R1", "webhook down")
    assert exc.error_code == "HOOK_FAILED"
    assert exc.record_id == "R1"
    assert exc.details["committed"] is True


def test_storage_exception_hides_reason_from_message() -> None:
    exc = StorageException("insert", "connection reset")
    assert exc.message == "Storage error during insert"
    assert exc.details["reason"] == "connection reset"


def test_record_store_not_configured_exception() -> None:
    exc = RecordStoreNotConfiguredException("sql")
    assert exc.error_code == "SERVICE_UNAVAILABLE"
    assert exc.details == {"backend": "sql"}
