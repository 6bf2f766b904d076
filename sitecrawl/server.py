"""HTTP endpoint exposing one crawl per request.

POST a body of ``{"config": {...}}`` to ``/`` or ``/crawl``; the response is
``{"team_id": ..., "items": [...]}``. Failures answer with a non-2xx status and
``{"error": ..., "team_id": "error", "items": []}``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.concurrency import run_in_threadpool

from .config import config_from_mapping
from .controller import CrawlController
from .errors import InvalidSeedUrl, TransportFailure
from .models import CrawlConfig

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class CrawlConfigPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    target_url: Optional[str] = Field(default=None, alias="targetUrl")
    seed_url: Optional[str] = Field(default=None, alias="seedUrl")
    max_pages: Optional[int] = Field(default=None, alias="maxPages")
    delay_ms: Optional[float] = Field(default=None, alias="delayMs")
    max_depth: Optional[int] = Field(default=None, alias="maxDepth")
    respect_robots: Optional[bool] = Field(default=None, alias="respectRobots")
    placeholder_on_failure: Optional[bool] = Field(default=None, alias="placeholderOnFailure")

    def to_config(self) -> CrawlConfig:
        return config_from_mapping(
            {
                "seedUrl": self.seed_url or self.target_url,
                "maxPages": self.max_pages,
                "delayMs": self.delay_ms,
                "maxDepth": self.max_depth,
                "respectRobots": self.respect_robots,
                "placeholderOnFailure": self.placeholder_on_failure,
            }
        )


class CrawlRequest(BaseModel):
    config: CrawlConfigPayload


ControllerFactory = Callable[[CrawlConfig], CrawlController]


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {"error": message, "team_id": "error", "items": []},
        status_code=status_code,
        headers=CORS_HEADERS,
    )


def create_app(controller_factory: ControllerFactory = CrawlController) -> FastAPI:
    app = FastAPI(title="sitecrawl", description="Single-domain crawl and extraction endpoint")

    async def preflight() -> PlainTextResponse:
        return PlainTextResponse("ok", headers=CORS_HEADERS)

    async def crawl(request: Request) -> JSONResponse:
        logger.info("Received %s request", request.method)
        try:
            try:
                payload: Dict[str, Any] = await request.json()
                config = CrawlRequest.model_validate(payload).config.to_config()
            except (InvalidSeedUrl, ValidationError, ValueError) as exc:
                logger.warning("Rejected crawl request: %s", exc)
                return error_response(str(exc), 400)

            logger.info("Starting server-side crawl for %s", config.seed_url)
            controller = controller_factory(config)
            result = await run_in_threadpool(controller.run)
            logger.info("Crawl finished for %s with %d items", result.team_id, len(result.items))
            return JSONResponse(result.to_dict(), headers=CORS_HEADERS)

        except Exception as exc:  # noqa: BLE001
            failure = TransportFailure(str(exc) or type(exc).__name__)
            logger.exception("Crawl request failed")
            return error_response(str(failure), 500)

    for path in ("/", "/crawl"):
        app.add_api_route(path, preflight, methods=["OPTIONS"])
        app.add_api_route(path, crawl, methods=["POST"])

    return app


app = create_app()
