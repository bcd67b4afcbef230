"""Session orchestration: parallel load, per-category state, lazy side fetches, export."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from log_history.aggregator import merge_logs
from log_history.classification import select
from log_history.config import Settings
from log_history.exceptions import FetchFailure, InputShapeError
from log_history.export import export_rows, write_xlsx
from log_history.models.category import Category
from log_history.models.log_entry import LogEntry
from log_history.models.raw import RawEntity
from log_history.models.uploads import ExcelUploadRecord
from log_history.sources import (
    JobSource,
    ProductSource,
    SourceRegistry,
    SupplierSource,
    unwrap_collection,
)
from log_history.views import build_rows

logger = logging.getLogger(__name__)


class SliceStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


# Independently loaded pieces of session data
LOGS = "logs"
JOBS = "jobs"
PRODUCTS = "products"
EXCEL_UPLOADS = "excelUploads"
SLICES = (LOGS, JOBS, PRODUCTS, EXCEL_UPLOADS)


@dataclass(frozen=True)
class CategoryState:
    """Load status and data of one slice. Replaced, never mutated."""

    status: SliceStatus = SliceStatus.IDLE
    data: tuple = ()


class LogSession:
    """
    One viewing session over the three entity APIs.
    The log snapshot is loaded once (all three sources or nothing); category-specific
    lists are fetched lazily when their category is selected. Fetch failures reset the
    affected slice to empty and are never raised to the caller.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        products: Optional[ProductSource] = None,
        suppliers: Optional[SupplierSource] = None,
        jobs: Optional[JobSource] = None,
    ):
        self.settings = settings or Settings.load()
        self.products = products or self._build_source("products")
        self.suppliers = suppliers or self._build_source("suppliers")
        self.jobs = jobs or self._build_source("jobs")
        self.category = Category.JOB
        self._offline = False

        self._lock = threading.Lock()
        self._states: dict[str, CategoryState] = {name: CategoryState() for name in SLICES}
        self._tokens: dict[str, int] = dict.fromkeys(SLICES, 0)

    def _build_source(self, source_id: str):
        return SourceRegistry.get(
            source_id,
            base_url=self.settings.api_base_url,
            timeout=self.settings.timeout,
        )

    def __enter__(self) -> "LogSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        for source in (self.products, self.suppliers, self.jobs):
            source.close()

    def state(self, name: str) -> CategoryState:
        with self._lock:
            return self._states[name]

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        """Current merged log snapshot, newest first."""
        return self.state(LOGS).data

    def _begin(self, name: str) -> int:
        """Mark a slice loading and return the request token for this fetch."""
        with self._lock:
            self._tokens[name] += 1
            self._states[name] = CategoryState(SliceStatus.LOADING, self._states[name].data)
            return self._tokens[name]

    def _finish(self, name: str, token: int, data: tuple, *, failed: bool = False) -> bool:
        """Store a fetch result unless a newer fetch of the same slice has started."""
        with self._lock:
            if token != self._tokens[name]:
                logger.debug("Discarding stale %s response (token %d < %d)", name, token, self._tokens[name])
                return False
            status = SliceStatus.FAILED if failed else SliceStatus.LOADED
            self._states[name] = CategoryState(status, data)
            return True

    def load(self) -> tuple[LogEntry, ...]:
        """
        Fetch products, suppliers and jobs in parallel and merge their logs.
        If any source fails the snapshot is empty rather than partial.
        """
        token = self._begin(LOGS)
        sources = (self.products, self.suppliers, self.jobs)
        try:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as ex:
                futures = [ex.submit(source.fetch_logs) for source in sources]
                product_logs, supplier_logs, job_logs = [f.result() for f in futures]
        except (FetchFailure, InputShapeError) as e:
            logger.warning("Log load failed, showing no logs: %s", e)
            self._finish(LOGS, token, (), failed=True)
            return self.entries

        merged = tuple(merge_logs(product_logs, supplier_logs, job_logs))
        logger.info(
            "Loaded %d log entries (%d product, %d supplier, %d job)",
            len(merged),
            len(product_logs),
            len(supplier_logs),
            len(job_logs),
        )
        self._finish(LOGS, token, merged)
        return self.entries

    def load_payloads(
        self,
        products: Any,
        suppliers: Any,
        jobs: Any,
        *,
        excel_uploads: Any = None,
    ) -> tuple[LogEntry, ...]:
        """
        Fill the session from already-decoded API responses (e.g. JSON exports on disk)
        instead of fetching. Side fetches are disabled afterwards.
        Malformed payloads raise InputShapeError.
        """
        payloads = {}
        for source, payload in ((self.products, products), (self.suppliers, suppliers), (self.jobs, jobs)):
            items = unwrap_collection(payload, source.collection_key)
            if items is None:
                raise InputShapeError(f"{source.source_id}: expected a list or {{'{source.collection_key}': [...]}}")
            payloads[source.source_id] = [RawEntity(data=i) for i in items if isinstance(i, dict)]

        merged = tuple(
            merge_logs(
                self.products.normalize(payloads[self.products.source_id]),
                self.suppliers.normalize(payloads[self.suppliers.source_id]),
                self.jobs.normalize(payloads[self.jobs.source_id]),
            )
        )
        if excel_uploads is not None and not isinstance(excel_uploads, list):
            raise InputShapeError("excel uploads: expected a list")
        try:
            uploads = tuple(
                ExcelUploadRecord.model_validate(u) for u in excel_uploads or [] if isinstance(u, dict)
            )
        except ValidationError as e:
            raise InputShapeError(f"excel uploads: {e.error_count()} invalid record(s)") from e
        for name, data in (
            (LOGS, merged),
            (PRODUCTS, tuple(e.data for e in payloads[self.products.source_id])),
            (JOBS, tuple(e.data for e in payloads[self.jobs.source_id])),
            (EXCEL_UPLOADS, uploads),
        ):
            self._finish(name, self._begin(name), data)
        self._offline = True
        logger.info("Loaded %d log entries from payloads", len(merged))
        return self.entries

    def _load_slices(self, fetchers: dict[str, Callable[[], list[Any]]]) -> None:
        """Fetch several slices together; one failure empties all of them."""
        tokens = {name: self._begin(name) for name in fetchers}
        try:
            with ThreadPoolExecutor(max_workers=len(fetchers)) as ex:
                futures = {name: ex.submit(fn) for name, fn in fetchers.items()}
                results = {name: f.result() for name, f in futures.items()}
        except FetchFailure as e:
            logger.warning("Fetching %s failed: %s", ", ".join(fetchers), e)
            for name, token in tokens.items():
                self._finish(name, token, (), failed=True)
            return
        for name, token in tokens.items():
            self._finish(name, token, tuple(results[name]))

    def refresh_category(self, category: Category | str) -> None:
        """Run the side fetches a category view needs (none for most categories)."""
        category = Category(category)
        if self._offline:
            return
        if category == Category.JOB:
            self._load_slices({JOBS: self.jobs.fetch_list})
        elif category == Category.EXCEL_UPLOADS:
            self._load_slices(
                {
                    EXCEL_UPLOADS: self.products.fetch_excel_uploads,
                    PRODUCTS: self.products.fetch_list,
                }
            )

    def select_category(self, category: Category | str) -> list:
        """Switch category, run its side fetches, and return its display rows."""
        self.category = Category(category)
        self.refresh_category(self.category)
        return self.rows(self.category)

    def selected_entries(self, category: Optional[Category | str] = None) -> list[LogEntry]:
        return select(self.entries, category or self.category)

    def rows(self, category: Optional[Category | str] = None) -> list:
        """Display rows for a category from the data already loaded."""
        return build_rows(
            category or self.category,
            self.entries,
            uploads=self.state(EXCEL_UPLOADS).data,
            products=self.state(PRODUCTS).data,
        )

    def export(self, path: Optional[str | Path] = None, category: Optional[Category | str] = None) -> Path:
        """Write the selected category's log entries to an .xlsx file."""
        rows = export_rows(self.selected_entries(category))
        return write_xlsx(rows, path or self.settings.export_filename)
