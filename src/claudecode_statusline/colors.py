"""ANSI colors"""

RESET = '\033[0m'
BOLD = '\033[1m'
DIM = '\033[2m'

RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
BLUE = '\033[34m'
MAGENTA = '\033[35m'
CYAN = '\033[36m'


def color_for_percentage(pct):
    """Color based on percentage used"""
    if pct >= 80:
        return RED
    if pct >= 60:
        return YELLOW
    return GREEN


def color_for_remaining(pct):
    """Color based on percentage left; the lower, the hotter"""
    if pct <= 20:
        return RED
    if pct <= 40:
        return YELLOW
    return GREEN
