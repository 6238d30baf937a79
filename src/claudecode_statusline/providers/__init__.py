"""
Third-party usage providers.

The set is fixed and ordered: the first provider whose domains appear in the
session's base URL wins.
"""

import logging

from ..config import CACHE_TTL, HTTP_TIMEOUT
from .base import Provider, Segment
from .yunyi import YunyiProvider
from .zhipu import ZhipuProvider

logger = logging.getLogger(__name__)

PROVIDERS = (
    ZhipuProvider(),
    YunyiProvider(),
)


def select_provider(endpoint, providers=PROVIDERS):
    """First provider matching the endpoint, or None"""
    for provider in providers:
        if provider.matches(endpoint):
            return provider
    return None


def get_provider(name, providers=PROVIDERS):
    for provider in providers:
        if provider.name == name:
            return provider
    return None


def usage_segments(credentials, provider=None, timeout=HTTP_TIMEOUT, ttl=CACHE_TTL):
    """Segments for the provider behind these credentials; [] if there is none"""
    if credentials is None:
        logger.debug("No relay credentials configured")
        return []
    provider = provider or select_provider(credentials.endpoint)
    if provider is None:
        logger.debug(f"No usage provider for {credentials.endpoint}")
        return []
    return provider.segments(credentials.endpoint, credentials.token, timeout=timeout, ttl=ttl)


__all__ = [
    'PROVIDERS',
    'Provider',
    'Segment',
    'YunyiProvider',
    'ZhipuProvider',
    'get_provider',
    'select_provider',
    'usage_segments',
]
