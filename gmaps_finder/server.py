"""
FastAPI Server for the Google Maps Business Finder

Provides API endpoints for:
- Searching businesses (JSON response or streamed NDJSON progress)
- Fetching place details
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from .config import DEFAULT_SEARCH_MAX_RESULTS
from .config_manager import FinderConfig
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    FinderError,
    LocationNotFound,
    TransportError,
)
from .extraction import build_category_tasks
from .extractor import BusinessFinder
from .validation import radius_in_miles, validate_max_results, validate_text

logger = logging.getLogger(__name__)


# Request Models
class SearchRequest(BaseModel):
    location: str
    keyword: str
    radius: float = 10
    radius_unit: str = "miles"
    max_results: int = DEFAULT_SEARCH_MAX_RESULTS
    country: Optional[str] = None
    details: bool = True
    category: bool = False


class PlaceDetailsRequest(BaseModel):
    place_id: str


def _status_for(error: Exception) -> int:
    if isinstance(error, LocationNotFound):
        return 404
    if isinstance(error, ValueError):
        return 400
    if isinstance(error, ConfigurationError):
        return 500
    if isinstance(error, (AuthenticationError, TransportError)):
        return 502
    return 500


def create_app(
    config: Optional[FinderConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the API app.

    Args:
        config: Finder configuration; read from the environment per request when None
        transport: Optional httpx transport handed to every BusinessFinder
    """
    app = FastAPI(title="Google Maps Business Finder API")
    app.state.config = config
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def make_finder(request: Request) -> BusinessFinder:
        cfg = request.app.state.config or FinderConfig.from_env()
        return BusinessFinder(cfg, transport=request.app.state.transport)

    def validated_radius(body: SearchRequest, finder: BusinessFinder) -> float:
        validate_text(body.location, "location")
        validate_text(body.keyword, "business keyword")
        validate_max_results(body.max_results, finder.config)
        if body.category:
            build_category_tasks(body.keyword.strip(), finder.config)
        return radius_in_miles(body.radius, body.radius_unit, finder.config)

    # API Endpoints
    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/search")
    async def search(body: SearchRequest, request: Request):
        """Run a search (and enrichment) and return all places at once."""
        progress_log: List[Dict[str, Any]] = []

        def on_progress(percent: float, status: str):
            progress_log.append({"percent": round(percent, 1), "status": status})

        try:
            async with make_finder(request) as finder:
                radius_miles = validated_radius(body, finder)
                result = await finder.find(
                    body.location.strip(),
                    radius_miles,
                    body.keyword.strip(),
                    max_results=body.max_results,
                    country=body.country,
                    details=body.details,
                    category=body.category,
                    on_progress=on_progress,
                )
        except (FinderError, ValueError) as e:
            raise HTTPException(status_code=_status_for(e), detail=str(e))

        data = result.to_dict()
        return {
            "success": True,
            "metadata": data["metadata"],
            "statistics": data["statistics"],
            "places": data["places"],
            "progress": progress_log,
        }

    @app.post("/api/search/stream")
    async def search_stream(body: SearchRequest, request: Request):
        """
        Run a search and stream newline-delimited JSON events:
        {"type": "progress", ...} while running, then one
        {"type": "result", ...} or {"type": "error", ...}.
        """
        try:
            finder = make_finder(request)
        except FinderError as e:
            raise HTTPException(status_code=_status_for(e), detail=str(e))
        try:
            radius_miles = validated_radius(body, finder)
        except ValueError as e:
            await finder.aclose()
            raise HTTPException(status_code=400, detail=str(e))

        queue: asyncio.Queue = asyncio.Queue()

        def on_progress(percent: float, status: str):
            queue.put_nowait({"type": "progress", "percent": round(percent, 1), "status": status})

        async def run():
            try:
                result = await finder.find(
                    body.location.strip(),
                    radius_miles,
                    body.keyword.strip(),
                    max_results=body.max_results,
                    country=body.country,
                    details=body.details,
                    category=body.category,
                    on_progress=on_progress,
                )
                queue.put_nowait({"type": "result", **result.to_dict()})
            except (FinderError, ValueError) as e:
                logger.warning("Streamed search failed: %s", e)
                queue.put_nowait({"type": "error", "status_code": _status_for(e), "detail": str(e)})
            finally:
                await finder.aclose()
                queue.put_nowait(None)

        async def events():
            task = asyncio.create_task(run())
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield json.dumps(event, ensure_ascii=False) + "\n"
            await task

        return StreamingResponse(events(), media_type="application/x-ndjson")

    @app.post("/api/place-details")
    async def get_place_details(body: PlaceDetailsRequest, request: Request):
        """Fetch detailed information about a place."""
        try:
            async with make_finder(request) as finder:
                details = await finder.get_place_details(body.place_id)
        except FinderError as e:
            status = 502 if not isinstance(e, ConfigurationError) else 500
            raise HTTPException(status_code=status, detail=str(e))

        return {
            "success": True,
            "place_id": body.place_id,
            "details": details.to_dict(),
        }

    return app


app = create_app()


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the API server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
