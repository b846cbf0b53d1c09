"""Application configuration settings."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional


# Highest page number a listing accepts; keeps offsets within the store's integer range
MAX_PAGE = 1_000_000


@dataclass
class PaginationSettings:
    """Pagination configuration."""

    default_page_size: int = 10
    max_page_size: int = 100
    min_page_size: int = 1
    max_page: int = MAX_PAGE

    # Per-resource overrides of default_page_size
    page_size_overrides: Dict[str, int] = field(default_factory=lambda: {
        "collaborator": 15,
    })

    def page_size_for(self, resource: str) -> int:
        """Get the default page size for a resource."""
        return self.page_size_overrides.get(resource, self.default_page_size)

    def clamp(self, page_size: int) -> int:
        """Constrain a requested page size to the configured bounds."""
        return max(self.min_page_size, min(page_size, self.max_page_size))


@dataclass
class Settings:
    """Main application settings."""

    # Application info
    app_name: str = "Business Hierarchy Administration API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Pagination
    pagination: PaginationSettings = field(default_factory=PaginationSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            app_name=os.getenv("APP_NAME", "Business Hierarchy Administration API"),
            app_version=os.getenv("APP_VERSION", "1.0.0"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            pagination=PaginationSettings(
                default_page_size=int(os.getenv("PAGINATION_DEFAULT_SIZE", "10")),
                max_page_size=int(os.getenv("PAGINATION_MAX_SIZE", "100")),
            ),
        )


# Singleton settings instance
_settings: Optional[Settings] = None


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
    get_settings.cache_clear()
