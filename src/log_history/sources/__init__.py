"""HTTP data sources for products, suppliers and repair jobs."""

from log_history.sources.base import BaseSource, unwrap_collection
from log_history.sources.jobs import JobSource
from log_history.sources.products import ProductSource
from log_history.sources.registry import SourceRegistry
from log_history.sources.suppliers import SupplierSource

__all__ = [
    "BaseSource",
    "JobSource",
    "ProductSource",
    "SourceRegistry",
    "SupplierSource",
    "unwrap_collection",
]
