import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from placefinder.core.body_limit import BodySizeLimitMiddleware
from placefinder.core.config import Settings, settings as default_settings
from placefinder.core.errors import ConfigurationError, RateLimitError
from placefinder.core.llm_connection import QueryExtractor, build_provider
from placefinder.core.logger import logs
from placefinder.core.rate_limiter import SlidingWindowRateLimiter
from placefinder.repos.cache_repo import TTLCache
from placefinder.routes.map_route import router as map_router
from placefinder.routes.search_route import router as search_router
from placefinder.services.Link_service import LinkBuilder
from placefinder.services.Places_service import PlacesService
from placefinder.services.Search_service import SearchService

_STATIC_DIR = Path(__file__).resolve().parent / "static"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Cross-Origin-Resource-Policy": "same-site",
    "Referrer-Policy": "no-referrer",
}


def _warn_missing_keys(settings: Settings):
    if not settings.GOOGLE_MAPS_SERVER_KEY:
        logs.log(logging.WARNING, "GOOGLE_MAPS_SERVER_KEY not set. Places web service calls will fail.")
    if not settings.GOOGLE_MAPS_BROWSER_KEY:
        logs.log(logging.WARNING, "GOOGLE_MAPS_BROWSER_KEY not set. Map embed will not work.")


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
    clock=time.monotonic,
) -> FastAPI:
    """
    Builds the application with its own cache, rate limiter and HTTP client.
    Tests pass their own settings, a mock-transport client and a fake clock.
    """
    settings = settings or default_settings
    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logs.log(logging.INFO, "Place Finder backend started")
        yield
        if owns_client:
            await client.aclose()

    app = FastAPI(title="Place Finder", version="1.0.0", lifespan=lifespan)

    _warn_missing_keys(settings)

    # --- Shared services ---
    cache = TTLCache(max_size=settings.CACHE_MAX_ENTRIES, ttl_seconds=settings.CACHE_TTL_SECONDS, clock=clock)
    links = LinkBuilder(settings.GOOGLE_MAPS_BROWSER_KEY)
    extractor = QueryExtractor(build_provider(settings, client), timeout=settings.HTTP_TIMEOUT_SECONDS)
    places_service = PlacesService(client, cache, settings.GOOGLE_MAPS_SERVER_KEY, timeout=settings.HTTP_TIMEOUT_SECONDS)

    app.state.settings = settings
    app.state.http_client = client
    app.state.cache = cache
    app.state.link_builder = links
    app.state.rate_limiter = SlidingWindowRateLimiter(
        limit=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        clock=clock,
    )
    app.state.search_service = SearchService(
        extractor,
        places_service,
        links,
        default_radius_meters=settings.DEFAULT_RADIUS_METERS,
    )

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
        allow_credentials=False,
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.MAX_BODY_BYTES)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    # --- Error handlers ---
    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors(), exclude={"ctx", "url"})},
        )

    @app.exception_handler(RateLimitError)
    async def _rate_limit_handler(request: Request, exc: RateLimitError):
        retry_after = max(1, int(exc.retry_after + 0.999))
        return JSONResponse(
            status_code=429,
            content={"error": "Too many requests"},
            headers={
                "Retry-After": str(retry_after),
                "RateLimit-Limit": str(exc.limit),
                "RateLimit-Remaining": "0",
                "RateLimit-Reset": str(retry_after),
            },
        )

    @app.exception_handler(ConfigurationError)
    async def _configuration_handler(request: Request, exc: ConfigurationError):
        return PlainTextResponse(str(exc), status_code=500)

    # --- Health Check ---
    @app.get("/health")
    async def health_check():
        return {"status": "ok", "timestamp": int(time.time() * 1000)}

    # --- Routers ---
    app.include_router(search_router)
    app.include_router(map_router)

    # --- Static front-end ---
    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(str(_STATIC_DIR / "index.html"))

    app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("placefinder.main:app", host="0.0.0.0", port=default_settings.PORT, reload=True)
