"""
Resolve the API endpoint and token the Claude Code session talks to.

Lookup order:
  1. baseURL / authToken in ~/.claude/settings.json
  2. env.ANTHROPIC_BASE_URL / env.ANTHROPIC_AUTH_TOKEN in the same file
  3. ANTHROPIC_BASE_URL / ANTHROPIC_AUTH_TOKEN environment variables

Each source must provide both values. Nothing here raises: a missing pair
just means no usage segments.
"""

import json
import logging
import os
from typing import NamedTuple, Optional

from .config import settings_file

logger = logging.getLogger(__name__)

BASE_URL_ENV = 'ANTHROPIC_BASE_URL'
AUTH_TOKEN_ENV = 'ANTHROPIC_AUTH_TOKEN'


class Credentials(NamedTuple):
    endpoint: str
    token: str


def _pair(endpoint, token):
    if isinstance(endpoint, str) and isinstance(token, str) and endpoint and token:
        return Credentials(endpoint, token)
    return None


def from_settings(path=None) -> Optional[Credentials]:
    path = path or settings_file()
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot read {path}: {e}")
        return None
    if not isinstance(data, dict):
        return None

    creds = _pair(data.get('baseURL'), data.get('authToken'))
    if creds:
        return creds

    env = data.get('env')
    if isinstance(env, dict):
        return _pair(env.get(BASE_URL_ENV), env.get(AUTH_TOKEN_ENV))
    return None


def from_environment(environ=None) -> Optional[Credentials]:
    environ = os.environ if environ is None else environ
    return _pair(environ.get(BASE_URL_ENV), environ.get(AUTH_TOKEN_ENV))


def resolve(path=None, environ=None) -> Optional[Credentials]:
    """Credentials from the settings file, falling back to the environment"""
    creds = from_settings(path)
    if creds:
        logger.debug("Using credentials from settings file")
        return creds
    creds = from_environment(environ)
    if creds:
        logger.debug("Using credentials from environment")
    return creds
