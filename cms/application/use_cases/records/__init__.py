"""Record use cases (generic record engine)."""

from cms.application.use_cases.records.record_operations import RecordService

__all__ = ["RecordService"]
