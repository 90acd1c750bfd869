import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: str = Field(default="INFO", alias="CTXLOG_LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", alias="CTXLOG_LOG_FORMAT")
    logger_name: str = Field(default="", alias="CTXLOG_LOGGER_NAME")

    @property
    def log_level_number(self) -> int:
        level = getattr(logging, self.log_level.upper(), None)
        return level if isinstance(level, int) else logging.INFO


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
