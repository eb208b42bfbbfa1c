# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Runtime settings for the intelligence engine and SLA monitor.
"""

import math
import os
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigError


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive number, got {raw!r}")
    return value


class IntelligenceSettings(BaseModel):
    """Tunables read from the environment."""

    model_config = ConfigDict(frozen=True)

    duplicate_sample_size: int = Field(default=200, gt=0, description="Corpus rows fetched per duplicate check")
    duplicate_timeout_seconds: float = Field(default=5.0, gt=0, description="Duplicate phase timeout")
    sla_fallback_hours: int = Field(default=48, gt=0, description="SLA window for complaints without a department SLA")
    sla_monitor_interval_minutes: int = Field(default=30, gt=0, description="Minutes between SLA sweeps")
    sla_monitor_batch_size: int = Field(default=100, gt=0, description="Complaints scanned per SLA sweep")

    @classmethod
    def from_env(cls) -> "IntelligenceSettings":
        """Load settings, raising ConfigError on malformed values."""
        return cls(
            duplicate_sample_size=_env_int('DUPLICATE_SAMPLE_SIZE', 200),
            duplicate_timeout_seconds=_env_float('DUPLICATE_TIMEOUT_SECONDS', 5.0),
            sla_fallback_hours=_env_int('SLA_FALLBACK_HOURS', 48),
            sla_monitor_interval_minutes=_env_int('SLA_MONITOR_INTERVAL_MINUTES', 30),
            sla_monitor_batch_size=_env_int('SLA_MONITOR_BATCH_SIZE', 100)
        )


_settings: Optional[IntelligenceSettings] = None


def get_settings() -> IntelligenceSettings:
    """Get singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = IntelligenceSettings.from_env()
    return _settings
