"""Configuration surface for the discount engine."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """Discount engine configuration."""

    # How invalid discount records are handled: clamp and report, or raise
    validation_mode: Literal["clamp", "strict"] = "clamp"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    # CLI defaults
    products_file: str = "products.json"
    currency_symbol: str = "$"

    class Config:
        env_prefix = "POS_DISCOUNT_"
        env_file = ".env"
        extra = "ignore"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names from env vars."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                raise ValueError(f"unknown log level: {v}")
        return v


@lru_cache
def load_settings(env_file: str | None = None) -> EngineSettings:
    """Load EngineSettings once per process."""
    if env_file:
        return EngineSettings(_env_file=Path(env_file))
    return EngineSettings()
