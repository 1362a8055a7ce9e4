import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Postboard"
    log_level: str = Field(default="INFO")
    search_max_results: int = Field(default=10, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="POSTBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler at the configured level."""
    logging.basicConfig(level=(level or settings.log_level).upper())
