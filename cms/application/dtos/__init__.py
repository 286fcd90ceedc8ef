"""DTOs passed between the application layer and its ports."""

from cms.application.dtos.principal import Principal
from cms.application.dtos.record import RecordPage

__all__ = ["Principal", "RecordPage"]
