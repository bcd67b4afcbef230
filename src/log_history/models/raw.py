"""Raw entity and change-event representations before normalization."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawChangeEvent(BaseModel):
    """
    One entry of an entity's ``changeHistory`` array as sent by the API.
    Unknown keys are kept so legacy top-level fields (itemName, productName) stay reachable.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    field: str = ""
    change_type: str = Field(default="", alias="changeType")
    old_value: Any = Field(default=None, alias="oldValue")
    new_value: Any = Field(default=None, alias="newValue")
    # Usually a string or null, but older records carry user ids here
    changed_by: Any = Field(default=None, alias="changedBy")
    changed_at: Any = Field(default=None, alias="changedAt")

    @field_validator("field", "change_type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @property
    def extras(self) -> dict[str, Any]:
        """Keys present on the event that are not part of the standard shape."""
        return dict(self.model_extra or {})


class RawEntity(BaseModel):
    """
    Flexible raw record from a data source (product, supplier or repair job).
    Treated as read-only; normalization never mutates ``data``.
    """

    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def change_history(self) -> list[RawChangeEvent]:
        """Parsed ``changeHistory``; empty when absent, null, or not a list."""
        history = self.data.get("changeHistory")
        if not isinstance(history, list):
            return []
        return [RawChangeEvent.model_validate(ev) for ev in history if isinstance(ev, dict)]
