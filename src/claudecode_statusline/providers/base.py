"""Provider contract shared by the third-party usage integrations"""

import json
import logging
import time
from typing import List, NamedTuple
from urllib.parse import urlsplit

import requests

from ..cache import UsageCache, utcnow
from ..config import CACHE_TTL, HTTP_TIMEOUT

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024


class Segment(NamedTuple):
    color: str
    text: str


def base_domain(endpoint):
    """scheme://host of an endpoint URL, dropping port and path"""
    try:
        parts = urlsplit(endpoint)
        host = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not host:
        return None
    if ':' in host:
        host = f"[{host}]"
    return f"{parts.scheme}://{host}"


def read_body(response, timeout):
    """
    Whole response body, abandoned once `timeout` seconds have passed in total.

    The requests timeout only bounds the connect and each socket read.
    """
    deadline = time.monotonic() + timeout
    chunks = []
    try:
        for chunk in response.iter_content(CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise requests.Timeout(f"body not received within {timeout}s")
            chunks.append(chunk)
    finally:
        response.close()
    return b"".join(chunks)


def optional_int(value):
    """Non-negative integer counters; anything else is treated as missing"""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


class Provider:
    """
    A usage quota backend.

    Subclasses set `name`, `domains` and `cache_filename`, and implement
    `request()` (url and headers), `parse()` (response body to snapshot),
    `load()` (cache dict to snapshot) and `render()` (snapshot to segments).
    """

    name = ''
    domains = ()
    cache_filename = ''

    def matches(self, endpoint):
        return any(domain in endpoint for domain in self.domains)

    def cache(self, ttl=CACHE_TTL):
        return UsageCache(self.cache_filename, ttl=ttl)

    def request(self, endpoint, token):
        raise NotImplementedError

    def parse(self, body, now):
        raise NotImplementedError

    def load(self, data):
        raise NotImplementedError

    def render(self, snapshot) -> List[Segment]:
        raise NotImplementedError

    def read_cache(self, ttl=CACHE_TTL):
        data = self.cache(ttl).read()
        if data is None:
            return None
        try:
            return self.load(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"[{self.name}] discarding malformed cache: {e}")
            return None

    def fetch(self, endpoint, token, timeout=HTTP_TIMEOUT, ttl=CACHE_TTL):
        """Query the vendor API and refresh the cache; None on any failure"""
        target = self.request(endpoint, token)
        if target is None:
            return None
        url, headers = target

        started = time.monotonic()
        try:
            response = requests.get(url, headers=headers, timeout=timeout, stream=True)
            if not 200 <= response.status_code < 300:
                logger.debug(f"[{self.name}] {url} returned HTTP {response.status_code}")
                response.close()
                return None
            content = read_body(response, max(0, timeout - (time.monotonic() - started)))
        except requests.RequestException as e:
            logger.debug(f"[{self.name}] request to {url} failed: {e}")
            return None

        try:
            body = json.loads(content)
        except ValueError as e:
            logger.debug(f"[{self.name}] undecodable response: {e}")
            return None

        now = utcnow()
        snapshot = self.parse(body, now)
        if snapshot is None:
            logger.debug(f"[{self.name}] unexpected response shape")
            return None

        self.cache(ttl).write(snapshot.to_dict(), now=now)
        return snapshot

    def get_usage(self, endpoint, token, timeout=HTTP_TIMEOUT, ttl=CACHE_TTL):
        """Fresh cache entry if there is one, otherwise a live fetch"""
        snapshot = self.read_cache(ttl)
        if snapshot is not None:
            logger.debug(f"[{self.name}] using cached usage")
            return snapshot
        return self.fetch(endpoint, token, timeout=timeout, ttl=ttl)

    def segments(self, endpoint, token, timeout=HTTP_TIMEOUT, ttl=CACHE_TTL) -> List[Segment]:
        snapshot = self.get_usage(endpoint, token, timeout=timeout, ttl=ttl)
        if snapshot is None:
            return []
        return self.render(snapshot)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"
