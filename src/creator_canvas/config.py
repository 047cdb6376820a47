"""
Configuration - Storage location and backend API settings.

Settings come from `~/.config/creator_canvas/config.json` when it exists,
then from `CREATOR_CANVAS_*` environment variables, which take precedence.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "creator_canvas" / "config.json"
DEFAULT_STORAGE_DIR = Path.home() / ".local" / "share" / "creator_canvas"
DEFAULT_API_BASE_URL = "https://localhost:7003"

ENV_PREFIX = "CREATOR_CANVAS_"


@dataclass
class CanvasConfig:
    """Application configuration."""
    storage_dir: Path = field(default_factory=lambda: DEFAULT_STORAGE_DIR)
    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str = ""
    user_id: str = "anonymous"
    request_timeout: float = 30.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary, masking the token."""
        return {
            "storage_dir": str(self.storage_dir),
            "api_base_url": self.api_base_url,
            "api_token": "***" if self.api_token else "",
            "user_id": self.user_id,
            "request_timeout": self.request_timeout,
        }


def _apply(config: CanvasConfig, data: dict[str, Any]) -> None:
    if data.get("storage_dir"):
        config.storage_dir = Path(data["storage_dir"]).expanduser()
    if data.get("api_base_url"):
        config.api_base_url = str(data["api_base_url"]).rstrip("/")
    if data.get("api_token"):
        config.api_token = str(data["api_token"])
    if data.get("user_id"):
        config.user_id = str(data["user_id"])
    if data.get("request_timeout"):
        config.request_timeout = float(data["request_timeout"])


def load_config(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> CanvasConfig:
    """
    Load configuration from file and environment.

    A missing or unreadable file is ignored; defaults apply.
    """
    path = path or CONFIG_PATH
    environ = os.environ if environ is None else environ
    config = CanvasConfig()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            _apply(config, data)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load config %s: %s", path, e)

    overrides = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX)
    }
    try:
        _apply(config, overrides)
    except ValueError as e:
        logger.warning("Ignoring invalid environment override: %s", e)

    return config
