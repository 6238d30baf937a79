"""
Zhipu / Z.ai coding plan quota.

GET {scheme}://{host}/api/monitor/usage/quota/limit returns
{"data": {"limits": [{"type": "TOKENS_LIMIT", "percentage": 45.0, ...}, ...]}}
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .. import colors
from ..cache import format_timestamp, parse_timestamp
from .base import Provider, Segment, base_domain, optional_int

QUOTA_PATH = '/api/monitor/usage/quota/limit'

TOKENS_LIMIT = 'TOKENS_LIMIT'
TIME_LIMIT = 'TIME_LIMIT'


@dataclass
class QuotaLimit:
    type: str
    percentage: float
    current_value: Optional[int] = None
    usage: Optional[int] = None

    @classmethod
    def from_dict(cls, data):
        """Build from an API/cache object; None if type or percentage is unusable"""
        if not isinstance(data, dict):
            return None
        limit_type = data.get('type')
        pct = data.get('percentage')
        if not isinstance(limit_type, str):
            return None
        if isinstance(pct, bool) or not isinstance(pct, (int, float)):
            return None
        try:
            pct = float(pct)
        except OverflowError:
            return None
        return cls(
            type=limit_type,
            percentage=pct,
            current_value=optional_int(data.get('currentValue')),
            usage=optional_int(data.get('usage')),
        )

    def to_dict(self):
        data = {'type': self.type, 'percentage': self.percentage}
        if self.current_value is not None:
            data['currentValue'] = self.current_value
        if self.usage is not None:
            data['usage'] = self.usage
        return data


@dataclass
class ZhipuUsage:
    token_limit: Optional[QuotaLimit]
    mcp_limit: Optional[QuotaLimit]
    timestamp: datetime

    @classmethod
    def from_dict(cls, data):
        timestamp = parse_timestamp(data.get('timestamp'))
        if timestamp is None:
            raise ValueError('missing timestamp')
        return cls(
            token_limit=QuotaLimit.from_dict(data.get('token_limit')),
            mcp_limit=QuotaLimit.from_dict(data.get('mcp_limit')),
            timestamp=timestamp,
        )

    def to_dict(self):
        return {
            'token_limit': self.token_limit.to_dict() if self.token_limit else None,
            'mcp_limit': self.mcp_limit.to_dict() if self.mcp_limit else None,
            'timestamp': format_timestamp(self.timestamp),
        }


class ZhipuProvider(Provider):
    name = 'zhipu'
    domains = ('bigmodel.cn', 'z.ai')
    cache_filename = '.zhipu_cache.json'

    def request(self, endpoint, token):
        domain = base_domain(endpoint)
        if domain is None:
            return None
        headers = {
            'Authorization': token,
            'Accept-Language': 'en-US,en',
            'Content-Type': 'application/json',
        }
        return f"{domain}{QUOTA_PATH}", headers

    def parse(self, body, now):
        data = body.get('data') if isinstance(body, dict) else None
        limits = data.get('limits') if isinstance(data, dict) else None
        if not isinstance(limits, list):
            return None

        token_limit = None
        mcp_limit = None
        for item in limits:
            limit = QuotaLimit.from_dict(item)
            if limit is None:
                continue
            if limit.type == TOKENS_LIMIT:
                token_limit = limit
            elif limit.type == TIME_LIMIT:
                mcp_limit = limit

        return ZhipuUsage(token_limit=token_limit, mcp_limit=mcp_limit, timestamp=now)

    def load(self, data):
        return ZhipuUsage.from_dict(data)

    def render(self, snapshot):
        parts = []
        if snapshot.token_limit:
            pct = snapshot.token_limit.percentage
            parts.append(Segment(colors.color_for_percentage(pct), f"[ZAI] Token(5h):{pct:.0f}%"))
        if snapshot.mcp_limit:
            pct = snapshot.mcp_limit.percentage
            parts.append(Segment(colors.color_for_percentage(pct), f"[ZAI] MCP(1月):{pct:.0f}%"))
        return parts
