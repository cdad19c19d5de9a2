from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import RedirectResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from cityweather.api.router import api_router
from cityweather.clients.opendatasoft import OpenDataSoftCityDirectory
from cityweather.clients.openweather import OpenWeatherClient
from cityweather.core.config import Settings, load_settings
from cityweather.core.logging import setup_logging
from cityweather.repositories.json_file import JsonFileStore
from cityweather.services.summary_cache import SummaryCache
from cityweather.web.router import ui_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.city_directory = OpenDataSoftCityDirectory(
            timeout_seconds=settings.http_timeout_seconds,
            base_url=str(settings.cities_api_url),
            dataset=settings.cities_dataset,
        )
        app.state.weather_provider = OpenWeatherClient(
            api_key=settings.weather_api_key,
            timeout_seconds=settings.http_timeout_seconds,
            base_url=str(settings.weather_api_url),
        )
        if not settings.weather_api_key:
            logger.warning("APP_WEATHER_API_KEY is not set; weather requests will be rejected")

        app.state.summary_cache = SummaryCache(JsonFileStore(settings.summary_store_path))
        loaded = app.state.summary_cache.load_all()
        logger.info(
            "Loaded %d weather summaries from %s", len(loaded), settings.summary_store_path
        )

        yield
        await app.state.city_directory.aclose()
        await app.state.weather_provider.aclose()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="City Weather API",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse("/ui/", status_code=303)

    @app.get("/health", tags=["meta"])
    def health():
        return {"name": "cityweather", "status": "ok"}

    app.include_router(api_router)
    app.include_router(ui_router)
    return app
