"""
File-backed usage cache, one JSON file per provider.

Entries carry an RFC 3339 UTC `timestamp` and are only handed back while
younger than the TTL. Stale or corrupt files are left in place and simply
overwritten by the next successful fetch. There is no locking: concurrent
status line processes may race, last writer wins.
"""

import json
import logging
from datetime import datetime, timezone

from .config import CACHE_TTL, claude_dir

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.now(timezone.utc)


def format_timestamp(dt):
    """RFC 3339 UTC string with a Z suffix"""
    return dt.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def parse_timestamp(value):
    """Parse an RFC 3339 string into an aware datetime, or None"""
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if dt.tzinfo is None:
        return None
    return dt


class UsageCache:
    """Cache file for a single provider"""

    def __init__(self, filename, ttl=CACHE_TTL, directory=None):
        self.filename = filename
        self.ttl = ttl
        self.directory = directory

    @property
    def path(self):
        return (self.directory or claude_dir()) / self.filename

    def read(self, now=None):
        """Cached payload if fresh, else None"""
        path = self.path
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.debug(f"Unreadable cache {path}: {e}")
            return None
        if not isinstance(data, dict):
            return None

        captured = parse_timestamp(data.get('timestamp'))
        if captured is None:
            logger.debug(f"Cache {path} has no valid timestamp")
            return None

        age = ((now or utcnow()) - captured).total_seconds()
        if age >= self.ttl:
            logger.debug(f"Cache {path} is stale ({age:.0f}s old)")
            return None
        return data

    def write(self, data, now=None):
        """Stamp and persist payload; failures are ignored"""
        path = self.path
        payload = dict(data)
        payload['timestamp'] = format_timestamp(now or utcnow())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            logger.debug(f"Cannot write cache {path}: {e}")
            return None
        return payload

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug(f"Cannot remove cache {self.path}: {e}")
