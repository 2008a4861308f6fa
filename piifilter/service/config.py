# piifilter/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

import hashlib
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from piifilter.core.definitions import DEFAULT_REDACTION_MARKER, RedactStrategy


class Settings(BaseSettings):
    """Global filter settings.

    Loads values from environment variables (prefix 'PII_FILTER_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PII_FILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Rules
    rules_file: Optional[Path] = Field(
        default=None,
        description="YAML rule file. Uses the packaged default rules when unset.",
    )

    default_strategy: RedactStrategy = Field(
        default=RedactStrategy.FULL,
        description="Strategy for rules that do not declare one.",
    )

    # Strategy rendering
    redaction_marker: str = Field(
        default=DEFAULT_REDACTION_MARKER,
        min_length=1,
        description="Replacement text for the full strategy.",
    )

    mask_char: str = Field(
        default="*",
        min_length=1,
        max_length=1,
        description="Character used by the partial strategy.",
    )

    mask_prefix_length: int = Field(
        default=0, ge=0, description="Leading characters kept by the partial strategy."
    )

    mask_suffix_length: int = Field(
        default=4, ge=0, description="Trailing characters kept by the partial strategy."
    )

    hash_algorithm: str = Field(
        default="sha256", description="hashlib algorithm used by the hash strategy."
    )

    # Filters
    json_redact_containers: bool = Field(
        default=False,
        description="Match value rules against serialized nested JSON objects and arrays.",
    )

    @field_validator("default_strategy", mode="before")
    @classmethod
    def parse_strategy(cls, v):
        """Accept strategy aliases such as 'redact' and 'mask'."""
        return RedactStrategy.parse(v)

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Ensure the algorithm is available in hashlib."""
        if v.lower() not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {v}")
        return v.lower()


# Singleton settings instance
settings = Settings()
