from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="AGLA_LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="AGLA_LOG_JSON")
    default_format: Literal["text", "json"] = Field(
        default="text", validation_alias="AGLA_DEFAULT_FORMAT"
    )

    @field_validator("log_json", mode="before")
    @classmethod
    def _parse_log_json(cls, v: bool | str) -> bool | str:
        if v == "":
            return False
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )
