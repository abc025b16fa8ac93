import logging
import threading
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from .base import FinderBaseSettings


class _Settings(FinderBaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="MEMBERFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    search_paths: str = Field(
        default="",
        description=(
            "Comma-separated class-name prefixes seeded into the shared finder "
            "(e.g., 'myapp.handlers,myapp.models'). Empty means every class is scanned."
        )
    )
    cache_key_separator: str = Field(
        default="_",
        min_length=1,
        description="Separator placed between the class name and the marker name in cache keys"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level used by setup_logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @field_validator("search_paths")
    @classmethod
    def validate_search_paths(cls, v: str) -> str:
        """Normalize the comma-separated prefix list.

        Blank segments are dropped. A prefix may not contain whitespace since
        it is matched against fully-qualified class names.
        """
        if not v:
            return v

        paths = [p.strip() for p in v.split(",") if p.strip()]

        for path in paths:
            if any(ch.isspace() for ch in path):
                raise ValueError(
                    f"Invalid search path '{path}'. "
                    f"Search paths must not contain whitespace."
                )

        return ",".join(paths)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @property
    def search_path_list(self) -> List[str]:
        """Search paths as a list, in the order they were configured."""
        if not self.search_paths:
            return []
        return self.search_paths.split(",")


_settings: Optional[_Settings] = None
_settings_lock = threading.Lock()


def get_settings(force_reload: bool = False) -> _Settings:
    """Get the singleton settings instance for the application.

    Args:
        force_reload: If True, creates a new Settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        Settings: The singleton Settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()
        ```
    """
    global _settings

    if _settings is None or force_reload:
        with _settings_lock:
            if _settings is None or force_reload:
                _settings = _Settings()

    return _settings


def _reload_settings() -> _Settings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.

    Returns:
        A fresh _Settings instance
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
