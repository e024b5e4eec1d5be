from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
API_BASE_URL = "https://api.spaceflightnewsapi.net/v4/articles/"
ARTICLE_ORDERING = "-published_at"
DEFAULT_PAGE_SIZE = 10
HTTP_TIMEOUT = 15
LOAD_MORE_THRESHOLD = 5

CONFIG_PATH = os.path.expanduser("~/.config/spaceflight/config.json")
CACHE_DIR = os.path.expanduser("~/.cache/spaceflight/images")
IMAGE_CACHE_TTL = 60 * 60 * 24

REQUEST_HEADERS = {
    "User-Agent": "spaceflight-tui/0.1 (+https://spaceflightnewsapi.net)",
    "Accept": "application/json",
}

# User-facing messages never carry raw error text.
GENERIC_LOAD_ERROR = "Could not load the articles."
GENERIC_LOAD_MORE_ERROR = "Could not load more articles."

DEFAULT_CONFIG: Dict[str, Any] = {
    "api_base_url": API_BASE_URL,
    "page_size": DEFAULT_PAGE_SIZE,
    "http_timeout": HTTP_TIMEOUT,
    "theme": "spaceflight-dark",
    "themes": {},
    "splash_seconds": 1.5,
    "deduplicate_articles": False,
    "image_cache_ttl": IMAGE_CACHE_TTL,
}

UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]/[/] search, [b {color}]r[/] refresh, [b {color}]enter[/] open"
    ),
}

# --- Logging ---
logger = logging.getLogger("spaceflight")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/spaceflight_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists(path: str = CONFIG_PATH) -> None:
    """Write the default config file if the user's config file is not found."""
    if os.path.exists(path):
        return
    logger.info("Config file not found at %s, creating default.", path)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)
    except OSError as e:
        logger.error("Failed to create default config file: %s", e)


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load the user config merged over the defaults."""
    ensure_config_file_exists(path)
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path, "r") as f:
            user_config = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return config

    if not isinstance(user_config, dict):
        logger.error("Ignoring config at %s: expected a JSON object", path)
        return config

    config.update(user_config)
    logger.info("Loaded config from %s", path)
    return config


def save_config(config: Dict[str, Any], path: str = CONFIG_PATH) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", path)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", path, e)
