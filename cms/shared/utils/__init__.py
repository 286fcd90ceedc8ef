"""Utility helpers shared by all layers."""

from cms.shared.utils.datetime import ensure_utc, format_utc, parse_utc, utc_now
from cms.shared.utils.generators import generate_ulid

__all__ = ["ensure_utc", "format_utc", "generate_ulid", "parse_utc", "utc_now"]
