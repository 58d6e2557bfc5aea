#!/usr/bin/env python
"""
Google Maps Business Finder - CLI

Find businesses near a location and export them to JSON and CSV.

Usage:
    python collect.py "Plano, TX" "pizza"
    python collect.py "Plano, TX" "pizza" -r 20 -n 500
    python collect.py "75024" repair --category --no-details

Requires GOOGLE_MAPS_API_KEY in the environment.
"""

import sys
from gmaps_finder.cli import main

if __name__ == "__main__":
    sys.exit(main())
