"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``ZenSearchConfig``
instance.  Dict-based access keeps working unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


class SearchSettings(BaseModel):
    """Ranking, prefix-fallback and snippet knobs for the search engine."""

    default_limit: int = Field(50, gt=0)
    prefix_scan_cap: int = Field(80, gt=0)
    prefix_penalty: float = Field(0.66, gt=0.0, le=1.0)
    recency_boost_max: float = Field(0.30, ge=0.0)
    recency_window_days: int = Field(30, gt=0)
    kind_boosts: dict[str, float] = {"reflection": 1.05}
    snippet_max_length: int = Field(160, gt=1)
    snippet_context: int = Field(50, ge=0)
    snippet_min_cut: int = Field(40, ge=0)
    index_umlaut_aliases: bool = True

    @field_validator("kind_boosts")
    @classmethod
    def _positive_boosts(cls, v: dict[str, float]) -> dict[str, float]:
        for kind, factor in v.items():
            if factor <= 0:
                raise ValueError(f"boost for kind {kind!r} must be positive, got {factor}")
        return {kind.strip().lower(): factor for kind, factor in v.items()}


class LoggingSettings(BaseModel):
    """Loguru sink settings."""

    level: str = "WARNING"
    file: str = ""

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level


class ZenSearchConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so hosts can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    search: SearchSettings = SearchSettings()
    logging: LoggingSettings = LoggingSettings()


def validate_config(data: dict) -> ZenSearchConfig:
    """Validate raw config data, converting pydantic errors to ConfigurationError."""
    try:
        return ZenSearchConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
