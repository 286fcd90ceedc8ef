"""Security adapters: bearer token verification and the session resolver."""

from cms.infrastructure.security.jwt import create_access_token, verify_token
from cms.infrastructure.security.session_resolver import TokenSessionResolver

__all__ = ["TokenSessionResolver", "create_access_token", "verify_token"]
