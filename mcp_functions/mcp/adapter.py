"""
Bridge between the host's HTTP request/response and the MCP transport.

The host request body can only be read once, so it is parsed here and handed
to the transport both re-serialized (inside the rebuilt request) and already
parsed. The transport's response is drained completely and returned in the
host's response shape.
"""

import json
import logging
from collections.abc import Callable

import httpx
from fastapi import Request, Response
from fastapi.responses import JSONResponse

from .server import MCPServer
from .transport import StreamableHTTPTransport

logger = logging.getLogger(__name__)

# Recomputed for the re-serialized body / drained response
_REQUEST_HEADERS_DROPPED = {"content-length", "transfer-encoding"}
_RESPONSE_HEADERS_DROPPED = {"content-length", "transfer-encoding"}

_BODYLESS_METHODS = {"GET", "DELETE", "HEAD", "OPTIONS"}


async def handle_mcp_request(
    request: Request, server_factory: Callable[[], MCPServer], json_response: bool = False
) -> Response:
    """
    Serve one MCP request with a fresh server and transport.

    Args:
        request: Host request
        server_factory: Builds the MCP server for this request only
        json_response: Answer with plain JSON instead of SSE

    Returns:
        Host response carrying the transport's status, headers and body;
        500 with a generic message when anything fails on the way
    """
    logger.info(f"MCP request received: {request.method} {request.url}")

    try:
        method = request.method.upper()
        raw_body = await request.body()
        has_body = bool(raw_body) or method not in _BODYLESS_METHODS

        # Parse once; a malformed body fails here, before the transport sees the request
        body_json = json.loads(raw_body) if has_body else None

        transport = StreamableHTTPTransport(server_factory(), json_response=json_response)
        headers = [(k, v) for k, v in request.headers.items() if k.lower() not in _REQUEST_HEADERS_DROPPED]

        if has_body:
            web_request = httpx.Request(method, str(request.url), headers=headers, content=json.dumps(body_json))
            web_response = await transport.handle_request(web_request, parsed_body=body_json)
        else:
            web_request = httpx.Request(method, str(request.url), headers=headers)
            web_response = await transport.handle_request(web_request)

        await web_response.aread()
        response_body = web_response.text
        response_headers = {
            key: value for key, value in web_response.headers.items() if key not in _RESPONSE_HEADERS_DROPPED
        }

        logger.info(f"MCP response status: {web_response.status_code}, body length: {len(response_body)}")

        return Response(content=response_body, status_code=web_response.status_code, headers=response_headers)

    except Exception:
        logger.error("MCP request error", exc_info=True)
        return JSONResponse(content={"error": "Internal server error"}, status_code=500)
