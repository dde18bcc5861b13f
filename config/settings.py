"""
config/settings.py — Canonical configuration contract for the sentinel probes.

Uses pydantic-settings to load, validate, and type-check the connection and
threshold settings shared by check_sentinel, check_sentinel_master and
check_sentinel_master_health.

Two usage modes:
  Production / scripts:
      cfg = load_settings()                                 # .env + os.environ
      cfg = load_settings("env/prod.env", SENTINEL_PORT=26380)  # + CLI overrides

  Tests (isolated — no env file, no os.environ bleed):
      cfg = ProbeSettings(SENTINEL_HOST="10.0.0.5", SENTINEL_MASTER="mymaster")
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re
from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from scripts.health.records import ThresholdPair


class ProbeSettings(BaseSettings):
    # Settings() reads purely from kwargs. load_settings() is the explicit
    # production entry point that merges env file, os.environ and CLI values.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------
    SENTINEL_HOST: str = "127.0.0.1"
    SENTINEL_PORT: int = 26379
    SENTINEL_TIMEOUT_SECONDS: float = 2.0
    SENTINEL_PASSWORD: Optional[str] = None

    # -------------------------------------------------------------------------
    # Master-specific checks
    # -------------------------------------------------------------------------
    SENTINEL_MASTER: Optional[str] = None

    # "<replicas>,<sentinels>"; an empty side disables that threshold
    SENTINEL_WARNING: str = "1,1"
    SENTINEL_CRITICAL: str = "1,1"

    # -------------------------------------------------------------------------
    # Convenience properties
    # -------------------------------------------------------------------------

    @property
    def warning(self) -> ThresholdPair:
        return ThresholdPair.parse(self.SENTINEL_WARNING)

    @property
    def critical(self) -> ThresholdPair:
        return ThresholdPair.parse(self.SENTINEL_CRITICAL)

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("SENTINEL_HOST", mode="before")
    @classmethod
    def host_non_empty(cls, v: str) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("SENTINEL_HOST must be a non-empty host name or address")
        return v

    @field_validator("SENTINEL_MASTER", "SENTINEL_PASSWORD", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("SENTINEL_PORT")
    @classmethod
    def port_in_range(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError(f"SENTINEL_PORT must be between 1 and 65535, got {v}")
        return v

    @field_validator("SENTINEL_TIMEOUT_SECONDS")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("SENTINEL_TIMEOUT_SECONDS must be > 0")
        return v

    @field_validator("SENTINEL_WARNING", "SENTINEL_CRITICAL")
    @classmethod
    def threshold_pair(cls, v: str) -> str:
        try:
            ThresholdPair.parse(v)
        except ValueError as exc:
            raise ValueError(f"invalid threshold pair '{v}': {exc}") from None
        return v


def read_env_file(env_file: str) -> dict[str, str]:
    """Parse KEY=VALUE lines; a missing file is an empty mapping."""
    file_vals: dict[str, str] = {}
    try:
        with open(env_file, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                k, _, v = line.partition("=")
                k = k.strip()
                # Strip inline comments: "26379   # sentinel port" → "26379"
                v = re.sub(r"\s+#.*$", "", v.strip())
                if k:
                    file_vals[k] = v
    except FileNotFoundError:
        pass
    return file_vals


def load_settings(env_file: str = ".env", **overrides: Any) -> ProbeSettings:
    """Load and validate settings from an env file + os.environ + overrides.

    Precedence (later wins): env file, os.environ, then keyword overrides
    whose value is not None. Command-line flags arrive as overrides, so an
    unset flag falls back to the environment and then to the defaults.

    Raises:
        ValidationError: if any value is invalid (port range, threshold pair,
            empty host, non-positive timeout).
    """
    merged: dict[str, Any] = {**read_env_file(env_file), **os.environ}
    merged.update({k: v for k, v in overrides.items() if v is not None})
    known = {k: v for k, v in merged.items() if k in ProbeSettings.model_fields}
    return ProbeSettings(**known)
