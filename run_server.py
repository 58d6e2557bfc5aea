#!/usr/bin/env python
"""
Run the API Server

Starts the FastAPI server for the business finder.

Usage:
    python run_server.py

The server runs on http://localhost:8000

Endpoints:
    GET  /api/health         - Health check
    POST /api/search         - Search (and enrich) businesses
    POST /api/search/stream  - Same search, streamed as NDJSON progress events
    POST /api/place-details  - Get place details
"""

from gmaps_finder.server import run_server

if __name__ == "__main__":
    run_server()
