"""Base class for entity data sources."""

import logging
from typing import Any, Optional

import httpx

from log_history.exceptions import FetchFailure
from log_history.models.log_entry import EntityType, LogEntry
from log_history.models.raw import RawEntity
from log_history.normalizer import flatten_logs

logger = logging.getLogger(__name__)


def unwrap_collection(payload: Any, key: str) -> Optional[list]:
    """
    Entity list from a response body: either a bare list or {key: list}.
    Returns None for any other shape.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return None


class BaseSource:
    """
    Read-only JSON API exposing entities with an embedded changeHistory.
    Subclasses set the path, collection key and the id/name fields used for normalization.
    """

    source_id: str = ""
    entity_type: EntityType
    path: str = ""
    collection_key: str = ""
    id_field: str = ""
    name_field: str = ""

    DEFAULT_HEADERS = {
        "User-Agent": "log-history/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str = "http://localhost:5002",
        *,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers=self.DEFAULT_HEADERS,
        )

    @property
    def url(self) -> str:
        return self.base_url + self.path

    def _get_json(self, url: str) -> Any:
        """GET a URL and decode JSON; network, status and decode errors become FetchFailure."""
        try:
            response = self._client.get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise FetchFailure(url, f"HTTP {e.response.status_code}", e) from e
        except httpx.HTTPError as e:
            raise FetchFailure(url, str(e) or type(e).__name__, e) from e
        except ValueError as e:
            raise FetchFailure(url, f"Invalid JSON: {e}", e) from e

    def fetch_payload(self) -> list[dict[str, Any]]:
        """Raw entity dicts; an unexpected response shape is a FetchFailure."""
        payload = self._get_json(self.url)
        items = unwrap_collection(payload, self.collection_key)
        if items is None:
            raise FetchFailure(self.url, f"Expected a list or {{'{self.collection_key}': [...]}}")
        return items

    def fetch_list(self) -> list[dict[str, Any]]:
        """Entity dicts for side views; an unexpected response shape yields an empty list."""
        items = unwrap_collection(self._get_json(self.url), self.collection_key)
        if items is None:
            logger.warning("%s: unexpected response shape from %s", self.source_id, self.url)
            return []
        return [item for item in items if isinstance(item, dict)]

    def fetch_raw(self) -> list[RawEntity]:
        """Fetch all entities as RawEntity records."""
        return [RawEntity(data=item) for item in self.fetch_payload() if isinstance(item, dict)]

    def normalize(self, entities: list[RawEntity]) -> list[LogEntry]:
        """Flatten entity change histories into log entries."""
        return flatten_logs(entities, self.entity_type, self.id_field, self.name_field)

    def fetch_logs(self) -> list[LogEntry]:
        """Fetch entities and return their flattened change logs."""
        entities = self.fetch_raw()
        logs = self.normalize(entities)
        logger.debug("%s: %d entities, %d log entries", self.source_id, len(entities), len(logs))
        return logs

    def close(self) -> None:
        self._client.close()
