"""Suppliers API."""

from log_history.models.log_entry import EntityType

from .base import BaseSource


class SupplierSource(BaseSource):
    """Suppliers keyed by supplierName, displayed by businessName."""

    source_id = "suppliers"
    entity_type = EntityType.SUPPLIER
    path = "/api/suppliers"
    collection_key = "suppliers"
    id_field = "supplierName"
    name_field = "businessName"
