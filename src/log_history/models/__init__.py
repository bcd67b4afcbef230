"""Data models for raw entities, log entries and uploads."""

from log_history.models.category import Category, StockPage
from log_history.models.log_entry import EntityType, LogEntry
from log_history.models.raw import RawChangeEvent, RawEntity
from log_history.models.uploads import ExcelUploadProduct, ExcelUploadRecord

__all__ = [
    "Category",
    "EntityType",
    "ExcelUploadProduct",
    "ExcelUploadRecord",
    "LogEntry",
    "RawChangeEvent",
    "RawEntity",
    "StockPage",
]
