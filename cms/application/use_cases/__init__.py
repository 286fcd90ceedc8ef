"""Use cases: orchestration of services and repositories per request."""
