"""Ports (Protocols) implemented by infrastructure."""

from cms.application.interfaces.repositories import IRecordStore
from cms.application.interfaces.services import ISessionResolver

__all__ = ["IRecordStore", "ISessionResolver"]
