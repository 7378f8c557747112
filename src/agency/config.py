"""Service configuration loaded from environment variables."""
from pathlib import Path
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agency.locale import SUPPORTED_LOCALES


class Settings(BaseSettings):
    """Service configuration loaded from ``AGENCY_*`` environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        cors_origins_raw: Raw comma-separated CORS origins string.
        shutdown_timeout: Seconds to wait for graceful shutdown.
        key: API key protecting the admin search endpoints.
        content_root: Directory with one folder per collection.
        database_path: SQLite file for search records.
        public_dir: Directory the static indexes are written to.
        locales_raw: Comma-separated locales to index.
        search_default_limit: Page size when none is requested.
        search_max_limit: Upper bound for the requested page size.
        static_index_format: Shape of the static index files.
        reindex_on_startup: Rebuild all search records at startup.
        watch_content: Sync search records on content file changes.
        event_debounce_ms: Debounce window for filesystem events.
        event_queue_size: Maximum number of queued change events.
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins_raw: str = "http://localhost:3000"
    shutdown_timeout: float = 30.0
    key: str = ""

    content_root: Path = Path("content")
    database_path: str = "data/search.db"
    public_dir: Path = Path("public")
    locales_raw: str = ",".join(SUPPORTED_LOCALES)

    search_default_limit: int = 10
    search_max_limit: int = 50
    static_index_format: Literal["simple", "categorized"] = "simple"

    reindex_on_startup: bool = True
    watch_content: bool = False
    event_debounce_ms: int = 200
    event_queue_size: int = 1000

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]

    @computed_field
    @property
    def locales(self) -> list[str]:
        """Supported locales listed in ``locales_raw``, in order.

        Returns:
            Locale codes; unsupported entries are ignored.
        """
        return [
            locale
            for locale in dict.fromkeys(part.strip() for part in self.locales_raw.split(","))
            if locale in SUPPORTED_LOCALES
        ]
