"""
ASGI function app entry points.

Run with:
    uvicorn mcp_functions.main:currency_app --port 7071
    uvicorn mcp_functions.main:holidays_app --port 7072
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .currency.router import router as currency_router
from .holidays.router import router as holidays_router


def _create_app(title: str, description: str, settings: Settings) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = FastAPI(
        title=title,
        description=description,
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Mcp-Protocol-Version", "x-functions-key"],
    )

    # Routes resolve settings through the dependency; pin them to this app's instance
    app.dependency_overrides[get_settings] = lambda: settings
    return app


def create_currency_app(settings: Settings | None = None) -> FastAPI:
    """Currency converter function app."""
    settings = settings or get_settings()
    app = _create_app("Currency Converter MCP", "Fixed-rate PLN/EUR conversion over MCP", settings)
    app.include_router(currency_router, prefix=settings.route_prefix)
    return app


def create_holidays_app(settings: Settings | None = None) -> FastAPI:
    """Public holidays function app."""
    settings = settings or get_settings()
    app = _create_app("Holidays MCP", "Public holiday lookups exposed as MCP tools", settings)
    app.include_router(holidays_router, prefix=settings.route_prefix)
    return app


currency_app = create_currency_app()
holidays_app = create_holidays_app()
