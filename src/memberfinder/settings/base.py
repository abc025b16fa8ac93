from pydantic_settings import BaseSettings, SettingsConfigDict


class FinderBaseSettings(BaseSettings):
    """Base class for memberfinder settings.

    Values come from environment variables (highest priority), then an
    optional ``.env`` file, then the defaults declared on the fields.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
