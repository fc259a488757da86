from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .datamodels import Section
from .exceptions import InvalidConfigurationError
from .query import validate_base_url

# --- Configuration ---
BASE_REQUEST_URL = "https://content.guardianapis.com/search"
DEFAULT_API_KEY = "test"
API_KEY_ENV = "NEWSFEED_API_KEY"
CONNECT_TIMEOUT = 15
READ_TIMEOUT = 10

CONFIG_PATH = os.path.expanduser("~/.config/newsfeed/config.json")

REQUEST_HEADERS = {
    "User-Agent": "newsfeed-tui/0.1 (+https://github.com/)",
    "Accept": "application/json",
}

DEFAULT_SECTIONS: List[Dict[str, Optional[str]]] = [
    {"title": "Overview", "key": None},
    {"title": "News", "key": "news"},
    {"title": "Opinion", "key": "commentisfree"},
    {"title": "Sport", "key": "sport"},
    {"title": "Culture", "key": "culture"},
    {"title": "Lifestyle", "key": "lifeandstyle"},
]

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]r[/] refresh, [b {color}]n[/] more, [b {color}]ctrl+l[/] sections"
    ),
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "base_url": BASE_REQUEST_URL,
    "api_key": DEFAULT_API_KEY,
    "sections": DEFAULT_SECTIONS,
    "theme": "textual-dark",
    "ui": UI_DEFAULTS,
}

# --- Logging ---
logger = logging.getLogger("newsfeed")

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> Optional[str]:
    """
    Send log records to a file; the terminal belongs to the TUI.

    Without ``debug`` or ``log_file`` everything is silenced. The thread name
    is part of each line so fetch-worker records can be told apart.
    """
    if not debug and not log_file:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    if not log_file:
        stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
        log_file = f"/tmp/newsfeed_debug_{stamp}_{os.getpid()}.log"

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        filename=log_file,
        filemode="a",
        format=LOG_FORMAT,
    )
    logging.getLogger("urllib3").setLevel(logging.INFO)
    logger.debug("Logging to %s", log_file)
    return log_file


@dataclass(frozen=True)
class FeedSettings:
    base_url: str = BASE_REQUEST_URL
    api_key: str = DEFAULT_API_KEY
    sections: Tuple[Section, ...] = field(
        default_factory=lambda: tuple(_parse_sections(DEFAULT_SECTIONS))
    )
    connect_timeout: float = CONNECT_TIMEOUT
    read_timeout: float = READ_TIMEOUT


def ensure_config_file_exists() -> None:
    """Write the default config file if the user's config file is not found."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("Config file not found at %s, creating default.", CONFIG_PATH)
        save_config(DEFAULT_CONFIG)


def load_config() -> Dict[str, Any]:
    """Load the main configuration file."""
    ensure_config_file_exists()
    try:
        with open(CONFIG_PATH, "r") as f:
            config = json.load(f)
            logger.info("Loaded config from %s", CONFIG_PATH)
            return config if isinstance(config, dict) else {}
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return {}


def save_config(config: Dict[str, Any]) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
        with open(CONFIG_PATH, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", CONFIG_PATH)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", CONFIG_PATH, e)


def load_settings(config: Dict[str, Any]) -> FeedSettings:
    """
    Build validated feed settings from a loaded config dict.

    The API key from the environment wins over the config file.
    """
    base_url = validate_base_url(config.get("base_url") or BASE_REQUEST_URL)
    api_key = os.environ.get(API_KEY_ENV) or config.get("api_key") or DEFAULT_API_KEY
    sections = _parse_sections(config.get("sections") or DEFAULT_SECTIONS)
    return FeedSettings(
        base_url=base_url,
        api_key=str(api_key),
        sections=tuple(sections),
        connect_timeout=_parse_timeout(config, "connect_timeout", CONNECT_TIMEOUT),
        read_timeout=_parse_timeout(config, "read_timeout", READ_TIMEOUT),
    )


def _parse_timeout(config: Dict[str, Any], key: str, default: float) -> float:
    raw = config.get(key, default)
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"'{key}' must be a number, got {raw!r}") from e
    if isinstance(raw, bool) or value <= 0:
        raise InvalidConfigurationError(f"'{key}' must be a positive number, got {raw!r}")
    return value


def _parse_sections(raw: Any) -> List[Section]:
    if not isinstance(raw, list):
        raise InvalidConfigurationError("'sections' must be a list")
    sections: List[Section] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("title"):
            raise InvalidConfigurationError(f"Invalid section definition: {item!r}")
        sections.append(Section(title=str(item["title"]), key=item.get("key") or None))
    return sections
