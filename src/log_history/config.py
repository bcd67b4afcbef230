"""Runtime settings: defaults, optional YAML file, environment overrides."""

import os
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field

from log_history.export import DEFAULT_FILENAME

_ENV_PREFIX = "LOG_HISTORY_"


class Settings(BaseModel):
    """Where the entity APIs live and how to talk to them."""

    api_base_url: str = Field(default="http://localhost:5002", description="Host serving /api/*")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    max_workers: int = Field(default=3, ge=1, description="Parallel fetches on initial load")
    export_filename: str = DEFAULT_FILENAME

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from YAML. Supports a nested 'api' section or flat keys."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        api = data.get("api") or {}
        flat: dict = {}
        for key, nested_key in (
            ("api_base_url", "base_url"),
            ("timeout", "timeout"),
            ("max_workers", "max_workers"),
        ):
            value = api.get(nested_key, data.get(key))
            if value is not None:
                flat[key] = value
        if data.get("export_filename"):
            flat["export_filename"] = data["export_filename"]
        return cls.model_validate(flat)

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> "Settings":
        """Defaults, then the YAML file (if given), then LOG_HISTORY_* environment variables."""
        settings = cls.from_yaml(path) if path else cls()
        overrides: dict = {}
        base_url = os.environ.get(f"{_ENV_PREFIX}API_BASE_URL")
        if base_url:
            overrides["api_base_url"] = base_url
        timeout = os.environ.get(f"{_ENV_PREFIX}TIMEOUT")
        if timeout:
            overrides["timeout"] = timeout
        export_filename = os.environ.get(f"{_ENV_PREFIX}EXPORT_FILENAME")
        if export_filename:
            overrides["export_filename"] = export_filename
        if not overrides:
            return settings
        return cls.model_validate({**settings.model_dump(), **overrides})
