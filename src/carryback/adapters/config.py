# src/carryback/adapters/config.py
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # logging
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///carryback.db")
    SCENARIO_BACKEND: Literal["sql", "json", "memory"] = Field(default="sql")
    SCENARIO_FILE: str = Field(default="scenarios.json")

    # -----------------------------
    # Sharing
    # -----------------------------
    SHARE_BASE_URL: str = Field(default="http://localhost:8000/")

    # Longest note term the API/CLI will schedule (the schedule is one row per month)
    MAX_TERM_YEARS: float = Field(default=50.0)

    model_config = SettingsConfigDict(
        env_prefix="CARRYBACK_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("MAX_TERM_YEARS", mode="before")
    @classmethod
    def _positive_years(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("MAX_TERM_YEARS must be numeric") from err
        if f <= 0:
            raise ValueError("MAX_TERM_YEARS must be > 0")
        return f

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return str(v).strip().upper() if v is not None else "INFO"


config = AppConfig()
