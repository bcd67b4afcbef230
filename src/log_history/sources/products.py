"""Products API (inventory items) and its Excel upload history."""

import logging

from pydantic import ValidationError

from log_history.exceptions import FetchFailure
from log_history.models.log_entry import EntityType
from log_history.models.uploads import ExcelUploadRecord

from .base import BaseSource

logger = logging.getLogger(__name__)


class ProductSource(BaseSource):
    """Products keyed by itemCode, displayed by itemName."""

    source_id = "products"
    entity_type = EntityType.PRODUCT
    path = "/api/products"
    collection_key = "products"
    id_field = "itemCode"
    name_field = "itemName"

    EXCEL_UPLOADS_PATH = "/api/products/excel-uploads"

    def fetch_excel_uploads(self) -> list[ExcelUploadRecord]:
        """
        Upload records; the endpoint returns a bare list, any other shape yields none.
        A record that does not parse is a FetchFailure for the whole list.
        """
        url = self.base_url + self.EXCEL_UPLOADS_PATH
        payload = self._get_json(url)
        if not isinstance(payload, list):
            logger.warning("Unexpected Excel uploads response from %s", url)
            return []
        try:
            uploads = [ExcelUploadRecord.model_validate(u) for u in payload if isinstance(u, dict)]
        except ValidationError as e:
            raise FetchFailure(url, f"Invalid upload record: {e.error_count()} validation error(s)", e) from e
        logger.debug("Fetched %d Excel uploads", len(uploads))
        return uploads
