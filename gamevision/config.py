"""
Configuration and logging setup.

Configuration is read from a JSON file (``config.json`` by default).
Environment variables take precedence over file values:

- RAWG_API_KEY overrides rawg_api_key
- NEWS_API_KEY overrides news_api_key
- GAMEVISION_DATA_FILE overrides data_file
- GAMEVISION_LOG_LEVEL overrides log_level
"""

import json
import logging
import os
from typing import Any, Dict

from .exceptions import ConfigError

DEFAULT_CONFIG: Dict[str, Any] = {
    'rawg_api_key': '',
    'news_api_key': '',
    'data_file': '.gamevision_store.json',
    'api_timeout_seconds': 10,
    'max_history_items': 20,
    'game_cache_max_entries': None,
    'max_news_articles': 25,
    'max_workers': 16,
    'log_level': 'WARNING',
}

_ENV_OVERRIDES = {
    'RAWG_API_KEY': 'rawg_api_key',
    'NEWS_API_KEY': 'news_api_key',
    'GAMEVISION_DATA_FILE': 'data_file',
    'GAMEVISION_LOG_LEVEL': 'log_level',
}

_PLACEHOLDER_VALUES = {'DEMO_MODE', 'DEMO_KEY', 'YOUR_RAWG_API_KEY_HERE',
                       'YOUR_NEWS_API_KEY_HERE'}


def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root GameVision logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger('gamevision')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


def is_placeholder_value(value: str) -> bool:
    """Check if a value is a placeholder/demo sentinel that should not be used for real API calls."""
    if not value or not isinstance(value, str):
        return True
    return value.startswith('YOUR_') or value in _PLACEHOLDER_VALUES


def load_config(config_path: str = 'config.json') -> Dict[str, Any]:
    """Load configuration from *config_path* merged over :data:`DEFAULT_CONFIG`.

    A missing file is not an error: defaults plus environment variables are
    used, so the library works with nothing but ``RAWG_API_KEY`` set.

    Raises:
        ConfigError: The file exists but is not a JSON object.
    """
    config = dict(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as fh:
                loaded = json.load(fh)
        except (json.JSONDecodeError, IOError) as exc:
            raise ConfigError(f"Error parsing config file {config_path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")
        config.update(loaded)

    for env_name, key in _ENV_OVERRIDES.items():
        if os.getenv(env_name):
            config[key] = os.getenv(env_name)
    return config


def require_api_key(config: Dict[str, Any], key: str) -> str:
    """Return ``config[key]`` or raise :class:`ConfigError` when it is a placeholder."""
    value = config.get(key, '')
    if is_placeholder_value(value):
        env_name = next((e for e, k in _ENV_OVERRIDES.items() if k == key), key.upper())
        raise ConfigError(
            f"Please configure '{key}' in config.json or set the {env_name} environment variable"
        )
    return value
