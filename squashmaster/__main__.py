#!/usr/bin/env python3
"""Main entry point for squashmaster when run as python -m squashmaster."""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
