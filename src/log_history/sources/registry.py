"""Registry for discovering and instantiating data sources."""

from typing import Type

from log_history.sources.base import BaseSource
from log_history.sources.jobs import JobSource
from log_history.sources.products import ProductSource
from log_history.sources.suppliers import SupplierSource


class SourceRegistry:
    """Discovers and provides entity data sources."""

    _sources: dict[str, Type[BaseSource]] = {
        "products": ProductSource,
        "suppliers": SupplierSource,
        "jobs": JobSource,
    }

    @classmethod
    def get(cls, source_id: str, **kwargs) -> BaseSource:
        """Get a source instance. kwargs passed to the source __init__."""
        source_cls = cls._sources.get(source_id.lower())
        if not source_cls:
            raise ValueError(f"Unknown source: {source_id}. Available: {list(cls._sources.keys())}")
        return source_cls(**kwargs)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Return list of available source identifiers."""
        return list(cls._sources.keys())
