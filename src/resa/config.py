"""Configuration objects for the showing assistant."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration pulled from environment variables."""

    clock_format: Literal["12h", "24h"] = Field(
        default="12h",
        validation_alias="RESA_CLOCK_FORMAT",
        description="How clock times are written inside email drafts.",
    )
    fallback_tour_name: str = Field(default="Showing Tour", validation_alias="RESA_FALLBACK_TOUR_NAME")
    flag_new_confirmations: bool = Field(default=True, validation_alias="RESA_FLAG_NEW_CONFIRMATIONS")
    log_level: str = Field(default="INFO", validation_alias="RESA_LOG_LEVEL")
    json_indent: int = Field(default=2, validation_alias="RESA_JSON_INDENT")
    api_host: str = Field(default="127.0.0.1", validation_alias="RESA_API_HOST")
    api_port: int = Field(default=8000, validation_alias="RESA_API_PORT")

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class ServiceInfo(BaseModel):
    """Metadata returned by the API alongside a generated tour."""

    generated_at: str
    engine_version: str
