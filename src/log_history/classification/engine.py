"""Classification engine: ordered category rules with an explanation trail."""

from typing import Callable, Iterable, Optional

from pydantic import BaseModel, Field

from log_history.models.category import Category, StockPage
from log_history.models.log_entry import LogEntry

from .rules import (
    apply_cart_rule,
    apply_job_rule,
    apply_repair_selection_rule,
    apply_stock_rule,
    explain_stock_page,
)


class ClassificationResult(BaseModel):
    """Result of classifying one log entry."""

    entry: LogEntry = Field(..., description="The entry that was classified")
    category: Category = Field(..., description="First matching category (job | cart | stock | all)")
    page: Optional[StockPage] = Field(default=None, description="Stock page, for stock entries only")
    explanations: list[str] = Field(default_factory=list)


RuleFn = Callable[[LogEntry], tuple[bool, str]]

# Precedence order; first match wins
_PRIMARY_RULES: list[tuple[Category, RuleFn]] = [
    (Category.JOB, apply_job_rule),
    (Category.CART, apply_cart_rule),
    (Category.STOCK, apply_stock_rule),
]

# Membership test for each category view
_VIEW_RULES: dict[Category, RuleFn] = {
    Category.JOB: apply_job_rule,
    Category.CART: apply_cart_rule,
    Category.STOCK: apply_stock_rule,
    Category.SELECT_PRODUCTS_FOR_REPAIR: apply_repair_selection_rule,
}


class LogClassifier:
    """
    Assigns log entries to display categories.
    Categories are derived on every call and never stored on the entry.
    """

    def __init__(self) -> None:
        self._rules = list(_PRIMARY_RULES)

    def classify(self, entry: LogEntry) -> ClassificationResult:
        """Apply rules in precedence order and return the first match."""
        explanations: list[str] = []
        category = Category.ALL
        for rule_category, rule_fn in self._rules:
            matched, explanation = rule_fn(entry)
            explanations.append(f"{rule_category.value}: {explanation}")
            if matched:
                category = rule_category
                break

        page: Optional[StockPage] = None
        if category == Category.STOCK:
            page, page_explanation = explain_stock_page(entry)
            explanations.append(f"page: {page_explanation}")

        return ClassificationResult(
            entry=entry,
            category=category,
            page=page,
            explanations=explanations,
        )

    def classify_many(self, entries: Iterable[LogEntry]) -> list[ClassificationResult]:
        """Classify multiple entries; one result per entry, in input order."""
        return [self.classify(e) for e in entries]


def classify(entry: LogEntry) -> Category:
    """Primary category of an entry (job, cart, stock, or all when nothing more specific matches)."""
    for category, rule_fn in _PRIMARY_RULES:
        matched, _ = rule_fn(entry)
        if matched:
            return category
    return Category.ALL


def in_category(entry: LogEntry, category: Category | str) -> bool:
    """Whether the entry appears in the given category view."""
    category = Category(category)
    if category == Category.ALL:
        return True
    if category == Category.EXCEL_UPLOADS:
        return False
    matched, _ = _VIEW_RULES[category](entry)
    return matched


def categories_for(entry: LogEntry) -> set[Category]:
    """Every category view that contains the entry."""
    return {c for c in Category if in_category(entry, c)}


def select(entries: Iterable[LogEntry], category: Category | str) -> list[LogEntry]:
    """
    Entries shown for a category, in their original order.
    Returns a new list; the input is not modified. Excel uploads are a separate
    stream, so that category selects no log entries.
    """
    category = Category(category)
    return [e for e in entries if in_category(e, category)]
