"""Application services: collection registry, access control, hook pipeline."""

from cms.application.services.access_control import (
    AccessControlService,
    AccessDecision,
    evaluate,
    is_public,
)
from cms.application.services.collection_registry import (
    CollectionRegistry,
    build_registry,
    load_collections,
)
from cms.application.services.hook_pipeline import HookPipeline

__all__ = [
    "AccessControlService",
    "AccessDecision",
    "CollectionRegistry",
    "HookPipeline",
    "build_registry",
    "evaluate",
    "is_public",
    "load_collections",
]
