# chipper/core/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import Optional, Union

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChipperSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    app_env: str = "dev"
    app_name: str = "Chipper Sim Harness"
    app_host: str = "127.0.0.1"
    app_port: int = 8000

    log_level: str = "INFO"

    # Build
    babel_root: str = Field(default="../babel", validation_alias="BABEL_ROOT")
    fallback_locale: str = Field(default="en", validation_alias="FALLBACK_LOCALE")

    # Runtime: "production" disables ?ea / ?eall
    sim_level: str = Field(default="development", validation_alias="SIM_LEVEL")

    # Where ErrorForwarder posts when no in-process parent is given
    harness_url: Optional[Union[AnyUrl, str]] = Field(
        default="http://127.0.0.1:8000", validation_alias="HARNESS_URL"
    )
    error_buffer_size: int = Field(default=200, validation_alias="ERROR_BUFFER_SIZE")

    @property
    def is_production(self) -> bool:
        return self.sim_level.strip().lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> ChipperSettings:
    return ChipperSettings()
