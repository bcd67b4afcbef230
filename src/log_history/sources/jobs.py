"""Repair jobs API."""

from log_history.models.log_entry import EntityType

from .base import BaseSource


class JobSource(BaseSource):
    """Repair jobs keyed by repairInvoice, displayed by customerName."""

    source_id = "jobs"
    entity_type = EntityType.JOB
    path = "/api/productsRepair"
    collection_key = "jobs"
    id_field = "repairInvoice"
    name_field = "customerName"
