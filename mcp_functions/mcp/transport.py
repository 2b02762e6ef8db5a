"""
MCP Streamable HTTP transport (stateless).

Implements the server side of the MCP Streamable HTTP transport on top of
standards-based request/response objects (httpx.Request / httpx.Response),
independent of the hosting framework. No session id is issued and nothing
survives a single request.
"""

import json
import logging
from typing import Any

import httpx

from .server import INTERNAL_ERROR, INVALID_REQUEST, PARSE_ERROR, MCPServer

logger = logging.getLogger(__name__)

# Error code used by the transport for HTTP-level rejections
TRANSPORT_ERROR = -32000

_UNSET = object()


def json_rpc_error(code: int, message: str, id: Any = None, status_code: int = 400, headers=None) -> httpx.Response:
    """Return JSON-RPC error response."""
    return httpx.Response(
        status_code,
        json={"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": id},
        headers=headers,
    )


def sse_body(messages: list[dict[str, Any]]) -> str:
    """Render messages as a server-sent events body."""
    return "".join(f"event: message\ndata: {json.dumps(msg)}\n\n" for msg in messages)


def _is_request(message: dict[str, Any]) -> bool:
    return "method" in message and "id" in message


def _is_valid_message(message: Any) -> bool:
    if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
        return False
    if "method" in message:
        return isinstance(message["method"], str)
    # Responses from the client
    return "id" in message and ("result" in message or "error" in message)


class StreamableHTTPTransport:
    """
    Stateless Streamable HTTP transport bound to one MCPServer.

    POST carries JSON-RPC messages; responses are written as SSE events or,
    when json_response is enabled, as a plain JSON document.
    """

    def __init__(self, server: MCPServer, json_response: bool = False):
        self.server = server
        self.json_response = json_response

    async def handle_request(self, request: httpx.Request, parsed_body: Any = _UNSET) -> httpx.Response:
        """
        Handle one HTTP request.

        Args:
            request: Standards-based request
            parsed_body: Already parsed JSON body; when omitted the body is read from the request

        Returns:
            Standards-based response
        """
        method = request.method.upper()

        if method == "POST":
            return await self._handle_post(request, parsed_body)
        if method == "GET":
            return self._handle_get(request)
        if method == "DELETE":
            return httpx.Response(200)

        return json_rpc_error(
            TRANSPORT_ERROR, "Method not allowed.", status_code=405, headers={"Allow": "GET, POST, DELETE"}
        )

    def _handle_get(self, request: httpx.Request) -> httpx.Response:
        accept = request.headers.get("accept", "")
        if "text/event-stream" not in accept:
            return json_rpc_error(
                TRANSPORT_ERROR, "Not Acceptable: Client must accept text/event-stream", status_code=406
            )

        # Stateless servers have no standalone stream to resume
        return json_rpc_error(
            TRANSPORT_ERROR,
            "Method not allowed: stateless server does not offer a standalone SSE stream",
            status_code=405,
            headers={"Allow": "POST, DELETE"},
        )

    async def _handle_post(self, request: httpx.Request, parsed_body: Any) -> httpx.Response:
        accept = request.headers.get("accept", "")
        if "application/json" not in accept or "text/event-stream" not in accept:
            return json_rpc_error(
                TRANSPORT_ERROR,
                "Not Acceptable: Client must accept both application/json and text/event-stream",
                status_code=406,
            )

        content_type = request.headers.get("content-type", "")
        if "application/json" not in content_type:
            return json_rpc_error(
                TRANSPORT_ERROR, "Unsupported Media Type: Content-Type must be application/json", status_code=415
            )

        protocol_version = request.headers.get("mcp-protocol-version")
        if protocol_version and protocol_version not in MCPServer.SUPPORTED_PROTOCOL_VERSIONS:
            supported = ", ".join(MCPServer.SUPPORTED_PROTOCOL_VERSIONS)
            return json_rpc_error(
                TRANSPORT_ERROR,
                f"Bad Request: Unsupported protocol version (supported versions: {supported})",
            )

        if parsed_body is _UNSET:
            try:
                body = json.loads(await request.aread())
            except ValueError:
                return json_rpc_error(PARSE_ERROR, "Parse error: Invalid JSON")
        else:
            body = parsed_body

        messages = body if isinstance(body, list) else [body]
        if not messages or not all(_is_valid_message(msg) for msg in messages):
            return json_rpc_error(INVALID_REQUEST, "Invalid Request: Expected JSON-RPC message")

        requests = [msg for msg in messages if _is_request(msg)]
        for msg in messages:
            if "method" in msg and "id" not in msg:
                await self.server.handle_message(msg)

        if not requests:
            return httpx.Response(202)

        responses = []
        for msg in requests:
            try:
                response = await self.server.handle_message(msg)
            except Exception as e:
                logger.error(f"Error handling message: {e}", exc_info=True)
                response = {"jsonrpc": "2.0", "id": msg.get("id"), "error": {"code": INTERNAL_ERROR, "message": str(e)}}
            if response:
                responses.append(response)

        if self.json_response:
            content = responses if isinstance(body, list) else responses[0]
            return httpx.Response(200, json=content)

        return httpx.Response(
            200,
            content=sse_body(responses).encode(),
            headers={"Content-Type": "text/event-stream", "Cache-Control": "no-cache"},
        )
