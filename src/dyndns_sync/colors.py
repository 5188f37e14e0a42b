#!/usr/bin/env python3
"""
ANSI Color Codes - Central color definitions for terminal output
Used by: logger.py, cli.py

Created: 2026-10-19
License: MIT
"""

################################################################################
# ANSI COLOR CODES
################################################################################

class Colors:
    """ANSI color codes for terminal output."""
    RED = '\033[0;31m'
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    BLUE = '\033[0;34m'
    CYAN = '\033[0;36m'

    BOLD_RED = '\033[1;31m'

    BOLD = '\033[1m'

    NC = '\033[0m'      # No Color / Reset
    RESET = '\033[0m'   # Alias for NC

################################################################################
# LOGGING COLOR MAP
################################################################################

LOG_COLORS = {
    'DEBUG': Colors.BLUE,
    'INFO': Colors.NC,
    'WARNING': Colors.YELLOW,
    'ERROR': Colors.RED,
    'CRITICAL': Colors.BOLD_RED,
    'SUCCESS': Colors.GREEN,
    'RESET': Colors.RESET
}

################################################################################
# LOGGING SYMBOLS
################################################################################

LOG_SYMBOLS = {
    'DEBUG': 'd',
    'INFO': 'ℹ',
    'WARNING': '!',
    'ERROR': '✗',
    'CRITICAL': '✗',
    'SUCCESS': '✓',
    'CREATE': '+',
    'PATCH': '~',
    'ARROW': '>'
}
