"""Normalized log entry model."""

from datetime import datetime
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from log_history.timestamps import parse_timestamp


class EntityType(StrEnum):
    PRODUCT = "product"
    SUPPLIER = "supplier"
    JOB = "job"

    @property
    def label(self) -> str:
        return ENTITY_LABELS[self]


ENTITY_LABELS: dict[EntityType, str] = {
    EntityType.PRODUCT: "Product",
    EntityType.SUPPLIER: "Supplier",
    EntityType.JOB: "Job List",
}


class LogEntry(BaseModel):
    """
    A single field-level change to a product, supplier or repair job.
    Produced by the normalizer and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity_type: EntityType = Field(..., alias="entityType")
    entity_id: str = Field(default="", alias="entityId")
    entity_name: str = Field(default="", alias="entityName")

    field: str = ""
    change_type: str = Field(default="", alias="changeType")
    old_value: Any = Field(default=None, alias="oldValue")
    new_value: Any = Field(default=None, alias="newValue")
    changed_by: Any = Field(default=None, alias="changedBy")
    changed_at: Any = Field(default=None, alias="changedAt", description="Timestamp as received")

    extras: dict[str, Any] = Field(
        default_factory=dict,
        description="Non-standard keys carried on the change event (e.g. itemName)",
    )

    @property
    def changed_at_dt(self) -> Optional[datetime]:
        """Parsed ``changed_at``; None when missing or unparseable."""
        return parse_timestamp(self.changed_at)
