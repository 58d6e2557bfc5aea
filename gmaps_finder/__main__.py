"""
Package entry point.

Allows running: python -m gmaps_finder "Plano, TX" "pizza"
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
