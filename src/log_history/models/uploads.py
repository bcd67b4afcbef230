"""Excel product-upload records (fetched separately from the change logs)."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExcelUploadProduct(BaseModel):
    """One product row processed by an Excel upload."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    item_code: Optional[str] = Field(default=None, alias="itemCode")
    item_name: Optional[str] = Field(default=None, alias="itemName")
    action: Optional[str] = None

    @field_validator("item_code", "item_name", "action", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ExcelUploadRecord(BaseModel):
    """An Excel file uploaded through the product screen."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    filename: Optional[str] = None
    uploaded_by: Optional[str] = Field(default=None, alias="uploadedBy")
    products: list[ExcelUploadProduct] = Field(default_factory=list)

    @field_validator("products", mode="before")
    @classmethod
    def _null_products(cls, value: Any) -> Any:
        return [] if value is None else value
