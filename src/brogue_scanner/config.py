"""Centralized configuration for the seed scanner using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from brogue_scanner.errors import ConfigurationError


SEED_MIN = 1
SEED_MAX = 0xFFFFFFFF
DEPTH_MIN = 1
DEPTH_MAX = 26
MATCHES_MAX = 255

Encoding = Literal["utf-16", "utf-8"]


class Settings(BaseSettings):
    """Run defaults loaded from ``BROGUE_SCANNER_*`` environment variables.

    Command-line options override every value here.
    """

    model_config = SettingsConfigDict(
        env_prefix="BROGUE_SCANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    data_dir: Path = Field(default=Path("."), description="Directory searched for seed catalog files")
    encoding: Encoding = Field(default="utf-16", description="Preferred catalog text encoding")
    nesting_max: int = Field(default=0, ge=0, le=16, description="Subdirectory levels searched below data_dir")
    matches_max: int = Field(default=10, ge=1, le=MATCHES_MAX, description="Successful seeds to find")
    log_level: str = Field(default="WARNING", description="Root log level")
    log_json: bool = Field(default=False, description="Emit structured JSON logs")
    stop_on_error: bool = Field(default=False, description="Abort the run on the first unreadable catalog")


class SearchLimits(BaseModel):
    """Global seed and depth bounds plus the success target."""

    model_config = ConfigDict(frozen=True)

    seed_min: int = Field(default=SEED_MIN, ge=SEED_MIN, le=SEED_MAX)
    seed_max: int = Field(default=SEED_MAX, ge=SEED_MIN, le=SEED_MAX)
    depth_min: int = Field(default=DEPTH_MIN, ge=DEPTH_MIN, le=DEPTH_MAX)
    depth_max: int = Field(default=DEPTH_MAX, ge=DEPTH_MIN, le=DEPTH_MAX)
    matches_max: int = Field(default=10, ge=1, le=MATCHES_MAX)

    @model_validator(mode="after")
    def _check_ranges(self) -> SearchLimits:
        problems = []
        if self.seed_min > self.seed_max:
            problems.append(f"seed range is inverted: {self.seed_min} > {self.seed_max}")
        if self.depth_min > self.depth_max:
            problems.append(f"depth range is inverted: {self.depth_min} > {self.depth_max}")
        if problems:
            raise ValueError("; ".join(problems))
        return self

    def seed_in_range(self, seed: int) -> bool:
        return self.seed_min <= seed <= self.seed_max

    def depth_in_range(self, depth: int) -> bool:
        return self.depth_min <= depth <= self.depth_max


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "invalid value"))
    message = message.removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def build_limits(**values: int | None) -> SearchLimits:
    """Build :class:`SearchLimits`, ignoring unset values.

    Raises:
        ConfigurationError: listing every invalid or inconsistent bound.
    """
    provided = {key: value for key, value in values.items() if value is not None}
    try:
        return SearchLimits(**provided)
    except ValidationError as exc:
        raise ConfigurationError(_describe(error) for error in exc.errors()) from exc


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment, converting validation failures."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(_describe(error) for error in exc.errors()) from exc
