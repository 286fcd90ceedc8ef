"""Collection registry: process-wide, read-only map from slug to CollectionConfig.

Built once at startup from static configuration and shared by every request.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from cms.domain.entities.collection import CollectionConfig
from cms.domain.exceptions import ResourceNotFoundException

logger = logging.getLogger(__name__)


class CollectionRegistry:
    """Immutable slug -> CollectionConfig lookup. No mutation after construction."""

    def __init__(self, collections: Iterable[CollectionConfig] = ()) -> None:
        table: dict[str, CollectionConfig] = {}
        for config in collections:
            if config.slug in table:
                raise ValueError(f"Duplicate collection slug: {config.slug!r}")
            table[config.slug] = config
        self._collections: Mapping[str, CollectionConfig] = MappingProxyType(table)

    def lookup(self, slug: str) -> CollectionConfig:
        """Return the configuration for slug.

        Raises:
            ResourceNotFoundException: If no collection has this slug.
        """
        config = self._collections.get(slug)
        if config is None:
            raise ResourceNotFoundException("collection", slug)
        return config

    def get(self, slug: str) -> CollectionConfig | None:
        return self._collections.get(slug)

    def slugs(self) -> list[str]:
        return list(self._collections)

    def __contains__(self, slug: object) -> bool:
        return slug in self._collections

    def __iter__(self) -> Iterator[CollectionConfig]:
        return iter(self._collections.values())

    def __len__(self) -> int:
        return len(self._collections)


def _coerce_collections(value: Any) -> list[CollectionConfig]:
    if callable(value) and not isinstance(value, CollectionConfig):
        value = value()
    if isinstance(value, CollectionConfig):
        return [value]
    if isinstance(value, Mapping):
        configs = list(value.values())
    else:
        configs = list(value)
    for config in configs:
        if not isinstance(config, CollectionConfig):
            raise TypeError(
                f"Expected CollectionConfig, got {type(config).__name__}"
            )
    return configs


def load_collections(target: str) -> list[CollectionConfig]:
    """Import static collection configuration from ``"package.module:attribute"``.

    The attribute may be a list or mapping of CollectionConfig, a single
    config, or a zero-argument callable returning one of those. When the
    attribute is omitted, ``collections`` is used.

    Raises:
        ValueError: If target is empty.
        ImportError / AttributeError: If the module or attribute does not exist.
    """
    if not target:
        raise ValueError("Collection module path is empty")
    module_path, _, attr = target.partition(":")
    module = importlib.import_module(module_path)
    configs = _coerce_collections(getattr(module, attr or "collections"))
    logger.info("Loaded %d collection(s) from %s", len(configs), target)
    return configs


def build_registry(
    collections: Iterable[CollectionConfig] | None, collections_module: str
) -> CollectionRegistry:
    """Return a registry from explicit configs, else from the configured module, else empty."""
    if collections is not None:
        return CollectionRegistry(collections)
    if collections_module:
        return CollectionRegistry(load_collections(collections_module))
    logger.warning("No collections configured; every /data request will return 404")
    return CollectionRegistry()
