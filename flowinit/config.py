# flowinit/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FLOWINIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO")
    # "console" for human readable output, "json" for log shipping
    log_format: str = Field(default="console")

    default_college: Optional[str] = Field(default=None)
    output_dir: str = Field(default="initializers")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
