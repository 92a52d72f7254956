"""Application configuration data class."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .._version import VERSION

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Application configuration settings."""
    # Remote analysis API, relative to the serving host unless absolute
    api_base_url: str = "http://localhost:5000/api"
    request_timeout: float = 300.0
    catalog_timeout: float = 30.0

    # Static catalog table; when set the tissues endpoint is not called
    catalog_file: Optional[str] = None

    # Keys in page.client_storage are shared by every app served from the
    # same origin, so ours carry a prefix
    storage_prefix: str = "enhancer_genie."
    history_key: str = "history"
    user_key: str = "user"

    # Web server; picked files are uploaded here before being read
    port: int = 8080
    open_browser: bool = True
    upload_dir: str = "uploads"

    script_version: str = VERSION

    def __post_init__(self):
        self.api_base_url = self.api_base_url.rstrip("/")
        if self.catalog_file:
            self.catalog_file = str(Path(self.catalog_file).resolve())

    @classmethod
    def from_env(cls, **overrides) -> "AppConfig":
        """Build a config from ``ENHANCER_GENIE_*`` variables; explicit overrides win."""
        values = {}
        env_map = {
            "ENHANCER_GENIE_API_URL": ("api_base_url", str),
            "ENHANCER_GENIE_TIMEOUT": ("request_timeout", float),
            "ENHANCER_GENIE_CATALOG_FILE": ("catalog_file", str),
            "ENHANCER_GENIE_STORAGE_PREFIX": ("storage_prefix", str),
            "ENHANCER_GENIE_PORT": ("port", int),
        }
        for env_name, (attr, cast) in env_map.items():
            raw = os.environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                values[attr] = cast(raw)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", env_name, raw)

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
