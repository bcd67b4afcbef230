"""Merge normalized log sequences into one newest-first timeline."""

from typing import Iterable

from log_history.models.log_entry import LogEntry
from log_history.timestamps import parse_timestamp, sort_timestamp

__all__ = ["merge_logs", "parse_timestamp"]


def merge_logs(
    products: Iterable[LogEntry],
    suppliers: Iterable[LogEntry],
    jobs: Iterable[LogEntry],
) -> list[LogEntry]:
    """
    Concatenate product, supplier and job logs and sort by changed_at descending.
    Unparseable timestamps sort as the epoch (last). Ties keep source order
    (sorted() with reverse=True is stable).
    """
    combined = [*products, *suppliers, *jobs]
    return sorted(combined, key=lambda e: sort_timestamp(e.changed_at), reverse=True)
