from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .options import MatchOptions, OutputSlot, parse_color

CONFIG_ENV_VAR = "PIXELMATCH_CONFIG"
SUPPORTED_CONFIG_EXTENSIONS = {".json", ".toml"}

__all__ = [
    "MatchRuntimeConfig",
    "MatchSettings",
    "load_match_config",
    "clear_match_config_cache",
]


class MatchSettings(BaseSettings):
    threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    include_anti_aliasing: bool = False
    alpha: float = Field(default=0.1, ge=0.0, le=1.0)
    anti_aliased_color: str = "255,255,0"
    diff_color: str = "255,0,0"
    diff_color_alt: Optional[str] = None
    diff_mask: bool = False
    workers: int = Field(default=1, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="PIXELMATCH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("anti_aliased_color", "diff_color", "diff_color_alt", mode="before")
    @classmethod
    def _join_channel_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(part) for part in value)
        if value == "":
            return None
        return value

    @field_validator("anti_aliased_color", "diff_color", "diff_color_alt")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_color(value)
        return value


@dataclass(frozen=True)
class MatchRuntimeConfig:
    options: MatchOptions
    workers: int

    def create_options(self, write_to: Optional[OutputSlot] = None) -> MatchOptions:
        return self.options.with_changes(write_to=write_to)

    @classmethod
    def from_settings(cls, settings: MatchSettings) -> "MatchRuntimeConfig":
        options = MatchOptions(
            threshold=settings.threshold,
            include_anti_aliasing=settings.include_anti_aliasing,
            alpha=settings.alpha,
            anti_aliased_color=settings.anti_aliased_color,
            diff_color=settings.diff_color,
            diff_color_alt=settings.diff_color_alt,
            diff_mask=settings.diff_mask,
        )
        return cls(options=options, workers=settings.workers)


_CONFIG_CACHE: Dict[Optional[Path], MatchRuntimeConfig] = {}


def _resolve_config_path(config_path: Optional[Path | str]) -> Optional[Path]:
    if config_path is not None:
        return Path(config_path)
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    return None


def _load_config_file(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    if suffix == ".toml":
        return tomllib.loads(path.read_text(encoding="utf-8"))
    raise ValueError(
        f"Unsupported config format '{path.suffix}'. Supported: {sorted(SUPPORTED_CONFIG_EXTENSIONS)}"
    )


def load_match_config(
    config_path: Path | str | None = None,
    *,
    force_reload: bool = False,
) -> MatchRuntimeConfig:
    """
    Build the comparison settings from a config file and the environment.

    The file is taken from ``config_path``, else from ``PIXELMATCH_CONFIG``.
    Values in the file win over ``PIXELMATCH_*`` environment variables.
    Results are cached per resolved path until ``force_reload`` is passed or
    :func:`clear_match_config_cache` is called.
    """
    path = _resolve_config_path(config_path)
    cache_key = path.resolve() if path else None
    if not force_reload and cache_key in _CONFIG_CACHE:
        return _CONFIG_CACHE[cache_key]

    data: Dict[str, Any] = {}
    if path:
        if not path.is_file():
            raise FileNotFoundError(f"Match config file not found: {path}")
        data = _load_config_file(path)

    settings = MatchSettings(**data)
    runtime = MatchRuntimeConfig.from_settings(settings)
    _CONFIG_CACHE[cache_key] = runtime
    return runtime


def clear_match_config_cache() -> None:
    _CONFIG_CACHE.clear()
