"""Unit tests for per-category display rows."""

from log_history.models.category import Category
from log_history.models.log_entry import LogEntry
from log_history.models.uploads import ExcelUploadProduct, ExcelUploadRecord
from log_history.views import (
    CartRow,
    LogRow,
    RepairSelectionRow,
    StockRow,
    UploadRow,
    build_rows,
    cart_row,
    find_product_for_upload,
    log_row,
    stock_row,
    upload_row,
)


def _make_entry(**kwargs) -> LogEntry:
    defaults = {
        "entity_type": "product",
        "entity_id": "P1",
        "entity_name": "Widget",
        "field": "stock",
        "change_type": "update",
        "old_value": 10,
        "new_value": 4,
        "changed_by": "repairTech1",
        "changed_at": "2024-01-01T10:00:00Z",
    }
    defaults.update(kwargs)
    return LogEntry(**defaults)


def _cart_entry(**kwargs) -> LogEntry:
    defaults = {
        "entity_type": "supplier",
        "entity_id": "S1",
        "entity_name": "Acme Parts",
        "field": "cart-add",
        "change_type": "cart",
        "old_value": None,
        "new_value": {"itemName": "Widget", "quantity": 3},
        "changed_by": "buyer1",
    }
    defaults.update(kwargs)
    return _make_entry(**defaults)


class TestLogRow:
    """Tests for log_row (job and all views)."""

    def test_columns(self) -> None:
        row = log_row(_make_entry(entity_type="job", entity_name="Jane", field="status", old_value=None))
        data = row.to_display()
        assert list(data) == [
            "Entity",
            "Entity Name",
            "Field",
            "Change Type",
            "Date/Time",
            "Old Value",
            "New Value",
            "Changed By",
        ]
        assert data["Entity"] == "Job List"
        assert data["Old Value"] == "N/A"
        assert data["New Value"] == "4"

    def test_missing_changed_by(self) -> None:
        assert log_row(_make_entry(changed_by=None)).changed_by == "N/A"


class TestCartRow:
    """Tests for cart_row."""

    def test_structured_new_value(self) -> None:
        row = cart_row(_cart_entry())
        assert row.supplier == "Acme Parts"
        assert row.item_name == "Widget"
        assert row.action == "Add"
        assert row.quantity == 3
        assert row.added_by == "buyer1"

    def test_event_level_item_name(self) -> None:
        entry = _cart_entry(new_value=7, extras={"itemName": "Gasket"})
        row = cart_row(entry)
        assert row.item_name == "Gasket"
        assert row.quantity == 7

    def test_missing_values(self) -> None:
        row = cart_row(_cart_entry(new_value=None, changed_by=None, changed_at=None))
        assert row.item_name == "N/A"
        assert row.quantity == "N/A"
        assert row.added_by == "N/A"
        assert row.date_time == "N/A"

    def test_quantity_falls_back_to_new_value(self) -> None:
        """An object without quantity is shown as-is."""
        row = cart_row(_cart_entry(new_value={"itemName": "Widget"}))
        assert row.quantity == {"itemName": "Widget"}

    def test_add_expense_action(self) -> None:
        row = cart_row(_make_entry(change_type="addExpense", new_value={"itemName": "Gasket", "quantity": 5}))
        assert row.action == "Add Stock (Excel)"
        assert row.quantity == 5


class TestStockRow:
    """Tests for stock_row."""

    def test_page_column(self) -> None:
        row = stock_row(_make_entry())
        assert row.page == "job list"
        assert row.product == "Widget"
        assert row.old_value == 10

    def test_unknown_page_text(self) -> None:
        row = stock_row(_make_entry(changed_by=None, old_value="5", new_value=5))
        assert row.page == "unknown"

    def test_product_fallbacks(self) -> None:
        assert stock_row(_make_entry(entity_name="", extras={"productName": "Legacy"})).product == "Legacy"
        assert stock_row(_make_entry(entity_name="")).product == "-"

    def test_missing_date(self) -> None:
        assert stock_row(_make_entry(changed_at=None)).date_time == "-"


class TestUploadJoin:
    """Tests for find_product_for_upload and upload_row."""

    PRODUCTS = [
        {"itemCode": "P1", "itemName": "Widget", "createdAt": "2023-12-01T08:00:00Z"},
        {"itemCode": "P2", "itemName": "Gasket", "createdAt": "2023-11-15T12:00:00Z"},
    ]

    def test_match_by_name(self) -> None:
        item = ExcelUploadProduct(item_code="ZZ", item_name="Gasket")
        assert find_product_for_upload(self.PRODUCTS, item)["itemCode"] == "P2"

    def test_match_by_code(self) -> None:
        item = ExcelUploadProduct(item_code="P1", item_name="Renamed")
        assert find_product_for_upload(self.PRODUCTS, item)["itemName"] == "Widget"

    def test_first_product_wins(self) -> None:
        """First product in list order matching either name or code."""
        item = ExcelUploadProduct(item_code="P1", item_name="Gasket")
        assert find_product_for_upload(self.PRODUCTS, item)["itemCode"] == "P1"

    def test_miss(self) -> None:
        assert find_product_for_upload(self.PRODUCTS, ExcelUploadProduct(item_code="X", item_name="Y")) is None

    def test_missing_keys_do_not_match(self) -> None:
        """An item with no name/code never matches a product that also lacks them."""
        assert find_product_for_upload([{"createdAt": "2024-01-01"}], ExcelUploadProduct()) is None

    def test_upload_row(self) -> None:
        upload = ExcelUploadRecord(
            filename="stock.xlsx",
            uploaded_by=None,
            products=[
                ExcelUploadProduct(item_code="P1", item_name="Widget", action="created"),
                ExcelUploadProduct(item_code="P9", item_name=None, action=None),
            ],
        )
        row = upload_row(upload, self.PRODUCTS)
        assert row.filename == "stock.xlsx"
        assert row.uploaded_by == "N/A"
        assert row.products_processed == 2
        assert row.products[0].created_at != "N/A"
        assert row.products[1].created_at == "N/A"
        assert row.products[1].item_name == "N/A"
        assert row.products[1].action == "N/A"

    def test_upload_row_display(self) -> None:
        row = upload_row(ExcelUploadRecord(), [])
        data = row.to_display()
        assert data["Filename"] == "N/A"
        assert data["Products Processed"] == 0
        assert data["Products"] == []


class TestBuildRows:
    """Tests for build_rows dispatch."""

    def _entries(self) -> list[LogEntry]:
        return [
            _make_entry(entity_id="repair"),
            _make_entry(entity_id="restock", changed_by="excelImport", old_value=4, new_value=20),
            _cart_entry(),
            _make_entry(entity_type="job", entity_name="Jane", field="status"),
        ]

    def test_row_types(self) -> None:
        entries = self._entries()
        assert all(isinstance(r, LogRow) for r in build_rows(Category.JOB, entries))
        assert all(isinstance(r, CartRow) for r in build_rows(Category.CART, entries))
        assert all(isinstance(r, StockRow) for r in build_rows(Category.STOCK, entries))
        assert all(isinstance(r, RepairSelectionRow) for r in build_rows("selectProductsForRepair", entries))
        assert len(build_rows(Category.ALL, entries)) == 4

    def test_counts(self) -> None:
        entries = self._entries()
        assert len(build_rows(Category.JOB, entries)) == 1
        assert len(build_rows(Category.CART, entries)) == 1
        assert len(build_rows(Category.STOCK, entries)) == 2
        assert len(build_rows(Category.SELECT_PRODUCTS_FOR_REPAIR, entries)) == 1

    def test_excel_uploads_from_upload_stream(self) -> None:
        rows = build_rows(
            Category.EXCEL_UPLOADS,
            self._entries(),
            uploads=[ExcelUploadRecord(filename="a.xlsx")],
        )
        assert len(rows) == 1
        assert isinstance(rows[0], UploadRow)

    def test_empty(self) -> None:
        assert build_rows(Category.STOCK, []) == []
