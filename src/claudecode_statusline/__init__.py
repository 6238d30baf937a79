"""
Claude Code Statusline

One-line status for Claude Code sessions:
- Model, directory and git branch (with uncommitted file count)
- Context window usage, input tokens and prompt cache hit rate
- Session cost, duration and lines changed
- Quota/balance of third-party relays (Zhipu Z.ai, Yunyi) the session's
  ANTHROPIC_BASE_URL points at, cached for a few minutes

Reads the Claude Code statusLine JSON on stdin.
"""

import logging

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .statusline import main, render, build_segments  # noqa: E402
from .providers import PROVIDERS, select_provider, usage_segments  # noqa: E402
from .credentials import Credentials, resolve  # noqa: E402

__all__ = [
    'main',
    'render',
    'build_segments',
    'PROVIDERS',
    'select_provider',
    'usage_segments',
    'Credentials',
    'resolve',
]
