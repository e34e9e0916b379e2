# src/stationcompass/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/stationcompass/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `STATIONCOMPASS_CONFIG_PATH`
- environment variables (`STATIONCOMPASS_LOG_LEVEL`, `STATIONCOMPASS_CATALOG_PATH`)

Design rule:
- Display strings and caps live in YAML, not hard-coded in the compass logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from stationcompass.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `stationcompass.config`."""
    text = resources.files("stationcompass.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "Station Compass"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/stations.json"


class SearchSettings(BaseModel):
    max_results: int = Field(8, ge=1)


class DisplaySettings(BaseModel):
    km_threshold_m: float = Field(1000, gt=0)
    km_decimals: int = Field(1, ge=0, le=3)
    unavailable: str = "--"


class MessageSettings(BaseModel):
    locating: str = "位置情報を取得しています..."
    position_failed: str = "位置情報の取得に失敗しました"
    position_unsupported: str = "この端末では位置情報が利用できません"
    empty_catalog: str = "駅データがありません"
    mode_device: str = "端末の向き基準"
    mode_north: str = "北基準"
    north_fallback_note: str = (
        "方位センサーが利用できない場合は端末の向きに関係なく、北から見た方角を表示します。"
    )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    messages: MessageSettings = Field(default_factory=MessageSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("STATIONCOMPASS_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("STATIONCOMPASS_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("STATIONCOMPASS_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
