"""Logging setup."""

from cms.shared.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
