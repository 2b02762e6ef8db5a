"""
Holiday function app routes.

- /runtime/webhooks/mcp - MCP tool trigger binding for the holiday tools
- /test-http - plain text smoke test
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ..config import Settings, get_settings
from ..dependencies import require_function_key
from ..mcp.adapter import handle_mcp_request
from ..mcp.server import MCPServer
from .client import HolidayClient
from .tools import default_client, get_holiday_tools

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Holidays"])


def get_holiday_client(settings: Settings = Depends(get_settings)) -> HolidayClient:
    """Holiday client dependency."""
    return default_client(settings)


@router.api_route(
    "/runtime/webhooks/mcp", methods=["POST", "GET", "DELETE"], dependencies=[Depends(require_function_key)]
)
async def mcp_tool_trigger(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: HolidayClient = Depends(get_holiday_client),
):
    """
    MCP tool trigger binding.

    Tool calls are dispatched to the native holiday handlers, which read
    their arguments from the trigger metadata.
    """

    def server_factory() -> MCPServer:
        server = MCPServer(name=settings.holidays_server_name, version=settings.holidays_server_version)
        server.register_tools(get_holiday_tools(client))
        return server

    return await handle_mcp_request(request, server_factory)


@router.api_route("/test-http", methods=["GET", "POST"])
async def test_http(request: Request):
    """Plain text smoke test for the function host."""
    logger.info(f'Test HTTP function processed request for url "{request.url}"')

    name = request.query_params.get("name") or (await request.body()).decode("utf-8", errors="replace") or "World"

    return PlainTextResponse(f"Hello, {name}! MCP function host is working.")
