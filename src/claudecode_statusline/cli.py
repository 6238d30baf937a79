#!/usr/bin/env python3
"""CLI entry point for claudecode-statusline"""

import sys
import json
import os
import logging
import argparse
from . import __version__
from .providers import PROVIDERS

DEBUG_ENV = 'CLAUDECODE_STATUSLINE_DEBUG'


def configure_logging(debug):
    """Send package debug messages to stderr when asked to"""
    if not debug:
        return
    logger = logging.getLogger('claudecode_statusline')
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('[DEBUG statusline] %(name)s: %(message)s'))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='claudecode-statusline',
        description='Claude Code status line with third-party usage quota',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Reads the Claude Code status JSON on stdin and prints one line:

  [Opus] │ project │ main +3 │ ctx:42% │ in:12.3k cache:87% │ $0.123 │ 12m │ [ZAI] Token(5h):45%

Usage segments are shown when ANTHROPIC_BASE_URL points at a supported
relay (bigmodel.cn / z.ai, yunyi.cfd). Credentials come from
~/.claude/settings.json (baseURL/authToken) or ANTHROPIC_BASE_URL and
ANTHROPIC_AUTH_TOKEN. Quota data is cached for 3 minutes in ~/.claude/.
Optional settings: ~/.claude/statusline.yml
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    parser.add_argument(
        '--no-git',
        action='store_true',
        help='Skip the git branch segment'
    )

    parser.add_argument(
        '--no-providers',
        action='store_true',
        help='Skip third-party usage segments'
    )

    parser.add_argument(
        '--provider',
        choices=[p.name for p in PROVIDERS],
        help='Use this provider regardless of the base URL'
    )

    parser.add_argument(
        '--refresh',
        action='store_true',
        help='Ignore the cached quota and fetch it again'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the provider usage snapshot as JSON'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Log diagnostics to stderr'
    )
    return parser


def target_provider(creds, provider=None):
    from .providers import select_provider

    if creds is None:
        return None
    return provider or select_provider(creds.endpoint)


def clear_cache(config, provider=None):
    """Drop the cached quota so the next render fetches it"""
    from .credentials import resolve

    target = target_provider(resolve(), provider)
    if target is not None:
        target.cache(config['cache_ttl']).clear()


def print_usage_json(config, provider=None, refresh=False):
    """Dump the matched provider's snapshot (cached or fresh)"""
    from .credentials import resolve

    if refresh:
        clear_cache(config, provider)
    creds = resolve()
    provider = target_provider(creds, provider)
    snapshot = None
    if provider is not None:
        snapshot = provider.get_usage(
            creds.endpoint,
            creds.token,
            timeout=config['http_timeout'],
            ttl=config['cache_ttl'],
        )

    output = {
        'provider': provider.name if provider else None,
        'endpoint': creds.endpoint if creds else None,
        'usage': snapshot.to_dict() if snapshot else None,
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))


def main(argv=None):
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    if sys.version_info < (3, 9):
        print("claudecode-statusline requires Python 3.9+", file=sys.stderr)
        return 1

    configure_logging(args.debug or os.environ.get(DEBUG_ENV) == '1')

    try:
        from .config import load_config
        from .providers import get_provider

        config = load_config()
        if args.no_color:
            config['color'] = False
        if args.no_git:
            config['git'] = False
        if args.no_providers:
            config['providers'] = False
        provider = get_provider(args.provider) if args.provider else None

        if args.json:
            print_usage_json(config, provider=provider, refresh=args.refresh)
            return 0

        if args.refresh and config['providers']:
            clear_cache(config, provider)

        from .statusline import main as statusline_main
        statusline_main(config=config, provider=provider)
        return 0

    except KeyboardInterrupt:
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
