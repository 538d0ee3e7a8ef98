"""Centralized config loading — read once at import time."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env from project root (parent of tgconfig/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

API_ENV_VAR = "TG_CONFIG_API"

_config = yaml.safe_load(CONFIG_PATH.read_text())


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config


def resolve_api_base(override: str | None = None) -> str:
    """Pick the API base URL: explicit flag, then environment, then config.

    The trailing slash is stripped so endpoints can be appended directly.
    """
    api_base = override or os.environ.get(API_ENV_VAR) or get_config()["api_base"]
    return api_base.rstrip("/")
