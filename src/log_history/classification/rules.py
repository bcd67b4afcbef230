"""Category rules: each predicate returns (matched, explanation)."""

from typing import Any

from log_history.models.category import StockPage
from log_history.models.log_entry import EntityType, LogEntry

STOCK_FIELD = "stock"
STOCK_CHANGE_TYPES = ("update", "delete")

# changedBy substring -> page (checked in order, first group that matches wins)
_CHANGED_BY_PAGES: list[tuple[tuple[str, ...], StockPage]] = [
    (("repair", "job"), StockPage.JOB_LIST),
    (("admin", "stock", "update"), StockPage.PRODUCT_STOCK),
    (("product",), StockPage.PRODUCT),
    (("system", "excel"), StockPage.STOCK_UPDATE),
]


def _is_number(value: Any) -> bool:
    """Strictly numeric: int or float, not bool and not numeric strings."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def apply_job_rule(entry: LogEntry) -> tuple[bool, str]:
    """Every repair-job entry belongs to the job view."""
    if entry.entity_type == EntityType.JOB:
        return True, "Job entity"
    return False, f"Not a job entity ({entry.entity_type.value})"


def apply_cart_rule(entry: LogEntry) -> tuple[bool, str]:
    """Supplier cart changes and product addExpense changes."""
    if entry.entity_type == EntityType.SUPPLIER and entry.change_type == "cart":
        return True, "Supplier cart change"
    if entry.entity_type == EntityType.PRODUCT and entry.change_type == "addExpense":
        return True, "Product expense added"
    return False, "Not a cart or expense change"


def apply_stock_rule(entry: LogEntry) -> tuple[bool, str]:
    """Product stock field updated or deleted."""
    if entry.entity_type != EntityType.PRODUCT:
        return False, "Stock edits apply to products only"
    if entry.field != STOCK_FIELD:
        return False, f"Field '{entry.field}' is not stock"
    if entry.change_type not in STOCK_CHANGE_TYPES:
        return False, f"Change type '{entry.change_type}' is not update/delete"
    return True, f"Stock {entry.change_type}"


def explain_stock_page(entry: LogEntry) -> tuple[StockPage, str]:
    """
    Guess which screen produced a stock change.
    First by substrings of changedBy, then by the direction of a numeric delta
    (stock going down means it was consumed by a repair job, going up means a restock).
    """
    changed_by = entry.changed_by
    if isinstance(changed_by, str) and changed_by:
        who = changed_by.lower()
        for needles, page in _CHANGED_BY_PAGES:
            for needle in needles:
                if needle in who:
                    return page, f"changedBy '{changed_by}' contains '{needle}'"

    old, new = entry.old_value, entry.new_value
    if _is_number(old) and _is_number(new):
        if old > new:
            return StockPage.JOB_LIST, f"Stock decreased {old} -> {new}"
        if old < new:
            return StockPage.STOCK_UPDATE, f"Stock increased {old} -> {new}"
        return StockPage.UNKNOWN, f"Stock unchanged at {old}"

    # Known gap: numeric strings ("5") are not compared
    return StockPage.UNKNOWN, "No changedBy match and values are not both numeric"


def infer_stock_page(entry: LogEntry) -> StockPage:
    """Page label for a stock change (see explain_stock_page)."""
    page, _ = explain_stock_page(entry)
    return page


def apply_repair_selection_rule(entry: LogEntry) -> tuple[bool, str]:
    """Stock edits attributed to the job list (products selected for a repair)."""
    is_stock, explanation = apply_stock_rule(entry)
    if not is_stock:
        return False, explanation
    page, page_explanation = explain_stock_page(entry)
    if page == StockPage.JOB_LIST:
        return True, page_explanation
    return False, f"Stock page is {page.value}: {page_explanation}"


def cart_action(entry: LogEntry) -> str:
    """Action label shown in the cart view."""
    if entry.field == "cart-add":
        return "Add"
    if entry.field == "cart-update":
        return "Update"
    if entry.change_type == "addExpense":
        return "Add Stock (Excel)"
    return entry.field
