#!/usr/bin/env python3
"""
DYNDNS-SYNC - Declarative Dynamic DNS Reconciler

Runs the package from a fresh checkout without installing it.

Created: 2026-10-19
License: MIT
"""

import sys
import os

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src'))

from dyndns_sync.cli import run  # noqa: E402

if __name__ == "__main__":
    run()
