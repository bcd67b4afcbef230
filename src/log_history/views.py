"""Per-category display rows built from classified log entries."""

from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from log_history.classification import cart_action, infer_stock_page, select
from log_history.export import format_value
from log_history.models.category import Category
from log_history.models.log_entry import LogEntry
from log_history.models.uploads import ExcelUploadProduct, ExcelUploadRecord
from log_history.timestamps import format_timestamp

NA = "N/A"


class _Row(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_display(self) -> dict[str, Any]:
        """Row keyed by column header."""
        return self.model_dump(mode="json", by_alias=True)


class LogRow(_Row):
    """Generic log row (job and all views)."""

    entity: str = Field(..., alias="Entity")
    entity_name: str = Field(..., alias="Entity Name")
    field: str = Field(..., alias="Field")
    change_type: str = Field(..., alias="Change Type")
    date_time: str = Field(..., alias="Date/Time")
    old_value: str = Field(..., alias="Old Value")
    new_value: str = Field(..., alias="New Value")
    changed_by: Any = Field(..., alias="Changed By")


class CartRow(_Row):
    supplier: str = Field(..., alias="Supplier")
    item_name: Any = Field(..., alias="Item Name")
    action: str = Field(..., alias="Action")
    quantity: Any = Field(..., alias="Quantity")
    added_by: Any = Field(..., alias="Added By")
    date_time: str = Field(..., alias="Date/Time")


class StockRow(_Row):
    product: str = Field(..., alias="Product")
    page: str = Field(..., alias="Page")
    old_value: Any = Field(..., alias="Old Value")
    new_value: Any = Field(..., alias="New Value")
    edited_by: Any = Field(..., alias="Edited By")
    date_time: str = Field(..., alias="Date/Time")


class RepairSelectionRow(_Row):
    product: str = Field(..., alias="Product")
    old_stock: Any = Field(..., alias="Old Stock")
    new_stock: Any = Field(..., alias="New Stock")
    edited_by: Any = Field(..., alias="Edited By")
    date_time: str = Field(..., alias="Date/Time")


class UploadProductRow(_Row):
    item_code: str = Field(..., alias="GRN")
    item_name: str = Field(..., alias="Item Name")
    action: str = Field(..., alias="Action")
    created_at: str = Field(..., alias="Created At")


class UploadRow(_Row):
    filename: str = Field(..., alias="Filename")
    uploaded_by: str = Field(..., alias="Uploaded By")
    products_processed: int = Field(..., alias="Products Processed")
    products: list[UploadProductRow] = Field(default_factory=list, alias="Products")


def log_row(entry: LogEntry) -> LogRow:
    return LogRow(
        entity=entry.entity_type.label,
        entity_name=entry.entity_name,
        field=entry.field,
        change_type=entry.change_type,
        date_time=format_timestamp(entry.changed_at),
        old_value=format_value(entry.old_value),
        new_value=format_value(entry.new_value),
        changed_by=entry.changed_by or NA,
    )


def cart_row(entry: LogEntry) -> CartRow:
    new = entry.new_value
    item_name = (new.get("itemName") if isinstance(new, dict) else None) or entry.extras.get("itemName") or NA
    quantity = new.get("quantity") if isinstance(new, dict) else None
    if quantity is None:
        quantity = new if new is not None else NA
    return CartRow(
        supplier=entry.entity_name,
        item_name=item_name,
        action=cart_action(entry),
        quantity=quantity,
        added_by=entry.changed_by or NA,
        date_time=format_timestamp(entry.changed_at),
    )


def _product_label(entry: LogEntry) -> str:
    return entry.entity_name or entry.extras.get("productName") or "-"


def stock_row(entry: LogEntry) -> StockRow:
    return StockRow(
        product=_product_label(entry),
        page=infer_stock_page(entry).value,
        old_value=entry.old_value,
        new_value=entry.new_value,
        edited_by=entry.changed_by,
        date_time=format_timestamp(entry.changed_at, placeholder="-"),
    )


def repair_selection_row(entry: LogEntry) -> RepairSelectionRow:
    return RepairSelectionRow(
        product=_product_label(entry),
        old_stock=entry.old_value,
        new_stock=entry.new_value,
        edited_by=entry.changed_by,
        date_time=format_timestamp(entry.changed_at, placeholder="-"),
    )


def find_product_for_upload(
    products: Iterable[dict[str, Any]],
    item: ExcelUploadProduct,
) -> Optional[dict[str, Any]]:
    """
    First product whose itemName or itemCode matches the uploaded item.
    A missing name or code on the uploaded item never matches.
    """
    for product in products:
        if not isinstance(product, dict):
            continue
        if item.item_name is not None and product.get("itemName") == item.item_name:
            return product
        if item.item_code is not None and product.get("itemCode") == item.item_code:
            return product
    return None


def upload_row(upload: ExcelUploadRecord, products: Sequence[dict[str, Any]]) -> UploadRow:
    details = []
    for item in upload.products:
        match = find_product_for_upload(products, item)
        created_at = format_timestamp(match.get("createdAt")) if match else NA
        details.append(
            UploadProductRow(
                item_code=item.item_code or NA,
                item_name=item.item_name or NA,
                action=item.action or NA,
                created_at=created_at,
            )
        )
    return UploadRow(
        filename=upload.filename or NA,
        uploaded_by=upload.uploaded_by or NA,
        products_processed=len(upload.products),
        products=details,
    )


_ROW_BUILDERS = {
    Category.JOB: log_row,
    Category.CART: cart_row,
    Category.STOCK: stock_row,
    Category.SELECT_PRODUCTS_FOR_REPAIR: repair_selection_row,
    Category.ALL: log_row,
}


def build_rows(
    category: Category | str,
    entries: Iterable[LogEntry],
    *,
    uploads: Iterable[ExcelUploadRecord] = (),
    products: Sequence[dict[str, Any]] = (),
) -> list[_Row]:
    """Display rows for a category. Excel uploads come from ``uploads`` joined against ``products``."""
    category = Category(category)
    if category == Category.EXCEL_UPLOADS:
        return [upload_row(u, products) for u in uploads]
    builder = _ROW_BUILDERS[category]
    return [builder(e) for e in select(entries, category)]
