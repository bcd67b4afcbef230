"""Log classification: category rules, stock page inference, category selection."""

from .engine import (
    ClassificationResult,
    LogClassifier,
    categories_for,
    classify,
    in_category,
    select,
)
from .rules import cart_action, explain_stock_page, infer_stock_page

__all__ = [
    "ClassificationResult",
    "LogClassifier",
    "cart_action",
    "categories_for",
    "classify",
    "explain_stock_page",
    "in_category",
    "infer_stock_page",
    "select",
]
