from __future__ import annotations

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Sources
    source_encoding: str = "utf-8"

    # HTTP (None blocks until the server answers)
    http_timeout: Optional[float] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    def configure_logging(self) -> None:
        logging.basicConfig(level=self.log_level.upper(), format=self.log_format)


def get_settings() -> Settings:
    return Settings()
