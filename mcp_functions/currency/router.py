"""
Currency function app routes.

- /health - static health document
- /mcp - MCP Streamable HTTP endpoint, one fresh server per request
"""

from functools import partial

from fastapi import APIRouter, Depends, Request

from ..config import Settings, get_settings
from ..dependencies import require_function_key
from ..mcp.adapter import handle_mcp_request
from .server import create_currency_server

router = APIRouter(tags=["Currency"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {"status": "ok", "server": settings.currency_server_name, "version": settings.currency_server_version}


@router.api_route("/mcp", methods=["POST", "GET", "DELETE"], dependencies=[Depends(require_function_key)])
async def mcp_endpoint(request: Request, settings: Settings = Depends(get_settings)):
    """
    Handle MCP JSON-RPC messages.

    POST /mcp
    Headers:
        Content-Type: application/json
        Accept: application/json, text/event-stream

    Body:
        JSON-RPC message or batch

    Returns:
        Transport response (SSE by default)
    """
    server_factory = partial(
        create_currency_server,
        settings.exchange_rates,
        name=settings.currency_server_name,
        version=settings.currency_server_version,
    )
    return await handle_mcp_request(request, server_factory)
