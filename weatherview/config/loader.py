"""YAML config loader with environment credential fallback."""

import logging
import os
from pathlib import Path

import yaml

from weatherview.config.defaults import DEFAULT_HIGHLIGHT_CITIES
from weatherview.config.schema import AppConfig

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENWEATHERMAP_API_KEY"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults. If no highlight cities are
    specified, injects DEFAULT_HIGHLIGHT_CITIES. An empty API key is filled
    from the OPENWEATHERMAP_API_KEY environment variable.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.info("Config %s not found, using defaults", path)

    if not raw.get("highlight_cities"):
        raw["highlight_cities"] = list(DEFAULT_HIGHLIGHT_CITIES)

    provider = raw.setdefault("provider", {}) or {}
    raw["provider"] = provider
    if not provider.get("api_key"):
        provider["api_key"] = os.environ.get(API_KEY_ENV, "")

    return AppConfig(**raw)


def redacted_dump(config: AppConfig) -> str:
    """JSON dump of the config with the API key masked."""
    masked = config.model_copy(
        update={
            "provider": config.provider.model_copy(
                update={"api_key": "***" if config.provider.api_key else ""}
            )
        }
    )
    return masked.model_dump_json(indent=2)
