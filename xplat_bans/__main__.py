#!/usr/bin/env python3
"""
Entry point for running xplat_bans as a module.
"""

import sys

from xplat_bans.cli import main

if __name__ == '__main__':
    sys.exit(main())
