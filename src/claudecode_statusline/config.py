"""
User configuration and well-known paths.

Settings live in an optional ~/.claude/statusline.yml, for example:

    cache_ttl: 180      # seconds a provider cache entry stays fresh
    http_timeout: 3     # seconds for the quota request
    providers: true     # show third-party usage segments
    git: true           # show branch and uncommitted file count
    color: true
"""

import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CACHE_TTL = 180
HTTP_TIMEOUT = 3

DEFAULTS = {
    'cache_ttl': CACHE_TTL,
    'http_timeout': HTTP_TIMEOUT,
    'providers': True,
    'git': True,
    'color': True,
}


def claude_dir():
    """Per-user Claude Code directory (~/.claude)"""
    return Path.home() / '.claude'


def settings_file():
    return claude_dir() / 'settings.json'


def config_file():
    return claude_dir() / 'statusline.yml'


def load_config(path=None):
    """Load config from YAML file, merged over DEFAULTS"""
    config = dict(DEFAULTS)
    path = path or config_file()
    if not path.exists():
        return config
    try:
        with open(path, 'rb') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.debug(f"Ignoring unreadable config {path}: {e}")
        return config
    if not isinstance(data, dict):
        logger.debug(f"Ignoring config {path}: expected a mapping")
        return config

    for key, default in DEFAULTS.items():
        if key not in data:
            continue
        value = data[key]
        if isinstance(default, bool):
            if isinstance(value, bool):
                config[key] = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            config[key] = value
        else:
            logger.debug(f"Ignoring invalid value for {key}: {value!r}")
    return config
