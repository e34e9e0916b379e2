"""
Logging configuration.

We use a YAML logging config (`src/stationcompass/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `STATIONCOMPASS_LOG_LEVEL`).
"""

from __future__ import annotations

import logging.config

from stationcompass.config.settings import Settings, get_logging_config, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = settings or get_settings()
    # Copy so the cached config is not mutated between calls.
    config = dict(get_logging_config())
    config["handlers"] = {k: dict(v) for k, v in (config.get("handlers") or {}).items()}
    config["root"] = dict(config.get("root") or {})

    level = settings.app.log_level.upper()
    config["root"]["level"] = level
    for handler in config["handlers"].values():
        if "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
