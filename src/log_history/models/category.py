"""Display categories and stock page labels."""

from enum import StrEnum


class Category(StrEnum):
    JOB = "job"
    CART = "cart"
    STOCK = "stock"
    SELECT_PRODUCTS_FOR_REPAIR = "selectProductsForRepair"
    EXCEL_UPLOADS = "excelUploads"
    ALL = "all"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[Category, str] = {
    Category.JOB: "Job List",
    Category.CART: "Add Expenses",
    Category.STOCK: "Stock Edits",
    Category.SELECT_PRODUCTS_FOR_REPAIR: "Select Products for Repair",
    Category.EXCEL_UPLOADS: "Product Uploads (Excel)",
    Category.ALL: "All",
}

# Message shown when a category view has no rows
EMPTY_MESSAGES: dict[Category, str] = {
    Category.CART: "No add expenses found.",
    Category.EXCEL_UPLOADS: "No Excel uploads found.",
}


class StockPage(StrEnum):
    """Screen a stock-quantity change is believed to have come from."""

    JOB_LIST = "job list"
    PRODUCT_STOCK = "product stock"
    PRODUCT = "product"
    STOCK_UPDATE = "stock update"
    UNKNOWN = "unknown"
