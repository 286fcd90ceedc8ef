"""Shared utilities (time, id generation) and logging setup."""
