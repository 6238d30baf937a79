#!/usr/bin/env python3
"""
Claude Code Statusline
Shows: [Model] │ dir │ branch +N │ ctx:X% │ in:Yk cache:Z% │ $cost │ 12m │ +a/-r │ provider usage
"""

import json
import logging
import re
import subprocess
import sys

from . import colors
from .config import load_config
from .credentials import resolve
from .providers import Segment, usage_segments

logger = logging.getLogger(__name__)

SEPARATOR = ' │ '
GIT_TIMEOUT = 2
ANSI_RE = re.compile(r'\x1b\[[0-9;]*[a-zA-Z]')


def get_dir_name(path):
    """Last component of a slash separated path"""
    return path.rstrip('/').rsplit('/', 1)[-1] if path.strip('/') else ''


def format_cost(cost):
    """More decimals for small amounts"""
    if cost < 0.01:
        return f"{cost:.4f}"
    if cost < 1:
        return f"{cost:.3f}"
    return f"{cost:.2f}"


def format_tokens(tokens):
    if tokens >= 1000:
        return f"{tokens / 1000:.1f}k"
    return str(tokens)


def format_duration(ms):
    """Format duration like '1h02m', '5m' or '42s'"""
    seconds = max(0, int(ms)) // 1000
    hours, minutes = seconds // 3600, seconds % 3600 // 60
    if hours:
        return f"{hours}h{minutes:02d}m"
    if minutes:
        return f"{minutes}m"
    return f"{seconds}s"


def cache_hit_rate(usage):
    """Share of prompt tokens served from the prompt cache, in percent"""
    read = usage.get('cache_read_input_tokens') or 0
    total = (usage.get('input_tokens') or 0) + (usage.get('cache_creation_input_tokens') or 0) + read
    if total <= 0:
        return None
    return read / total * 100


def _git(args, cwd):
    try:
        result = subprocess.run(
            ['git', *args],
            cwd=cwd or '.',
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git {' '.join(args)} failed: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def get_git_info(cwd=None):
    """Current branch and number of uncommitted files, or (None, 0)"""
    out = _git(['branch', '--show-current'], cwd)
    branch = out.strip() if out else ''
    if not branch:
        return None, 0
    status = _git(['status', '--porcelain'], cwd) or ''
    dirty = sum(1 for line in status.splitlines() if line.strip())
    return branch, dirty


def _dict(data, key):
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def build_segments(data, show_git=True):
    """Session segments in display order (provider usage is appended separately)"""
    parts = []
    model = _dict(data, 'model')
    workspace = _dict(data, 'workspace')
    cost = _dict(data, 'cost')
    context = _dict(data, 'context_window')

    name = model.get('display_name')
    if name:
        parts.append(Segment(colors.BOLD + colors.MAGENTA, f"[{name}]"))

    current_dir = workspace.get('current_dir') or data.get('cwd')
    if isinstance(current_dir, str) and current_dir:
        parts.append(Segment(colors.CYAN, get_dir_name(current_dir)))

    if show_git:
        branch, dirty = get_git_info(current_dir if isinstance(current_dir, str) else None)
        if branch:
            text = f"{branch} +{dirty}" if dirty else branch
            parts.append(Segment(colors.BLUE, text))

    pct = _number(context.get('used_percentage'))
    if pct is not None:
        parts.append(Segment(colors.color_for_percentage(pct), f"ctx:{pct:.0f}%"))

    usage = _dict(context, 'current_usage')
    input_tokens = _number(usage.get('input_tokens'))
    if input_tokens is not None:
        text = f"in:{format_tokens(input_tokens)}"
        rate = cache_hit_rate(usage)
        if rate:
            text += f" cache:{rate:.0f}%"
        parts.append(Segment(colors.DIM, text))

    total_cost = _number(cost.get('total_cost_usd'))
    if total_cost and total_cost > 0:
        parts.append(Segment(colors.YELLOW, f"${format_cost(total_cost)}"))

    duration = _number(cost.get('total_duration_ms'))
    if duration and duration > 0:
        parts.append(Segment(colors.DIM, format_duration(duration)))

    added = _number(cost.get('total_lines_added')) or 0
    removed = _number(cost.get('total_lines_removed')) or 0
    if added > 0 or removed > 0:
        parts.append(Segment(colors.GREEN, f"+{added}{colors.RED}/-{removed}"))

    return parts


def paint(segment, use_color=True):
    if not use_color:
        return ANSI_RE.sub('', segment.text)
    return f"{segment.color}{segment.text}{colors.RESET}"


def build_statusline(segments, use_color=True):
    return SEPARATOR.join(paint(s, use_color) for s in segments)


def render(data, config=None, credentials=None, provider=None):
    """Full status line for a parsed session document"""
    config = config or load_config()
    segments = build_segments(data, show_git=config['git'])
    if config['providers']:
        if credentials is None:
            credentials = resolve()
        segments.extend(usage_segments(
            credentials,
            provider=provider,
            timeout=config['http_timeout'],
            ttl=config['cache_ttl'],
        ))
    return build_statusline(segments, use_color=config['color'])


def read_input(stream=None):
    """Parsed session JSON from stdin, or None"""
    stream = stream or sys.stdin
    try:
        data = json.load(stream)
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot parse input: {e}")
        return None
    return data if isinstance(data, dict) else None


def main(config=None, provider=None):
    data = read_input()
    if data is None:
        print("Error parsing JSON")
        return
    print(render(data, config=config, provider=provider))


if __name__ == '__main__':
    main()
