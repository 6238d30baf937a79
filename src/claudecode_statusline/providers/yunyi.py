"""
Yunyi relay balance.

GET https://yunyi.cfd/user/api/v1/me returns the account's daily quota and
spend in cents plus the subscription expiry:
{"quota": {...}, "usage": {...}, "timestamps": {"expires_at": "..."}}
"""

from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone
from typing import Optional

from .. import colors
from ..cache import format_timestamp, parse_timestamp
from .base import Provider, Segment, optional_int

API_URL = 'https://yunyi.cfd/user/api/v1/me'

# Expiry is shown in China Standard Time
DISPLAY_TZ = timezone(timedelta(hours=8))


def bearer(token):
    """Authorization value with exactly one Bearer prefix"""
    if token.lower().startswith('bearer '):
        return token
    return f"Bearer {token}"


def remaining_balance(quota, total_spent):
    """Unspent quota in cents, never negative"""
    return max(0, quota - total_spent)


def format_expiry(value):
    """'MM-DD HH:MM' in UTC+8, or the raw value if it is not RFC 3339"""
    dt = parse_timestamp(value)
    if dt is None:
        return value
    try:
        return dt.astimezone(DISPLAY_TZ).strftime('%m-%d %H:%M')
    except (OverflowError, ValueError):
        return value


@dataclass
class YunyiUsage:
    daily_used: Optional[int] = None
    daily_quota: Optional[int] = None
    daily_spent: Optional[int] = None
    daily_total_spent: Optional[int] = None
    expires_at: Optional[str] = None
    request_count: Optional[int] = None
    daily_request_count: Optional[int] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        timestamp = parse_timestamp(data.get('timestamp'))
        if timestamp is None:
            raise ValueError('missing timestamp')
        expires_at = data.get('expires_at')
        values = {
            f.name: optional_int(data.get(f.name))
            for f in fields(cls) if f.name not in ('expires_at', 'timestamp')
        }
        return cls(
            expires_at=expires_at if isinstance(expires_at, str) else None,
            timestamp=timestamp,
            **values,
        )

    def to_dict(self):
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['timestamp'] = format_timestamp(self.timestamp)
        return data


class YunyiProvider(Provider):
    name = 'yunyi'
    domains = ('yunyi.rdzhvip.com', 'yunyi.cfd')
    cache_filename = '.yunyi_cache.json'

    def request(self, endpoint, token):
        headers = {
            'Authorization': bearer(token),
            'Accept': 'application/json',
            'Accept-Language': 'en,zh-CN;q=0.9,zh;q=0.8',
        }
        return API_URL, headers

    def parse(self, body, now):
        if not isinstance(body, dict):
            return None
        quota = body.get('quota')
        usage = body.get('usage')
        stamps = body.get('timestamps')
        if not all(isinstance(part, dict) for part in (quota, usage, stamps)):
            return None

        daily_spent = optional_int(quota.get('daily_spent'))
        if daily_spent is None:
            daily_spent = optional_int(usage.get('daily_spent'))
        expires_at = stamps.get('expires_at')

        return YunyiUsage(
            daily_used=optional_int(quota.get('daily_used')),
            daily_quota=optional_int(quota.get('daily_quota')),
            daily_spent=daily_spent,
            daily_total_spent=optional_int(quota.get('daily_total_spent')),
            expires_at=expires_at if isinstance(expires_at, str) else None,
            request_count=optional_int(usage.get('request_count')),
            daily_request_count=optional_int(usage.get('daily_request_count')),
            timestamp=now,
        )

    def load(self, data):
        return YunyiUsage.from_dict(data)

    def render(self, snapshot):
        parts = []
        quota = snapshot.daily_quota
        spent = snapshot.daily_total_spent
        if quota is not None and spent is not None:
            remaining = remaining_balance(quota, spent)
            pct = remaining / quota * 100 if quota > 0 else 0.0
            parts.append(Segment(colors.color_for_remaining(pct), f"[YUNYI] Rem:${remaining / 100:.2f}"))
        if snapshot.expires_at:
            parts.append(Segment(colors.DIM, f"[YUNYI] Exp:{format_expiry(snapshot.expires_at)}"))
        return parts
