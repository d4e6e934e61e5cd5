import json
import os
from pathlib import Path
from typing import Optional

from ecp.constants import ECP_API_URL

CONFIG_DIR = Path.home() / ".config" / "ecp_comments"
CONFIG_FILE = CONFIG_DIR / "config.json"
API_URL_ENV = "ECP_API_URL"


def load_config() -> dict:
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, "r") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(key: str, value: str):
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    config = load_config()
    config[key] = value
    with open(CONFIG_FILE, "w") as f:
        json.dump(config, f, indent=2)


def get_saved_api_url() -> Optional[str]:
    return load_config().get("api_url")


def get_api_url() -> str:
    """Environment override, then saved setting, then the public indexer."""
    return os.environ.get(API_URL_ENV) or get_saved_api_url() or ECP_API_URL
