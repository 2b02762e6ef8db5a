"""
MCP Server - async JSON-RPC implementation.

This is the core component that:
- Handles MCP protocol messages
- Manages tool registration
- Validates tool arguments before a handler runs

Servers hold no connection state; a fresh instance can be built per request.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

ToolHandler = Callable[..., Awaitable[Any]]


class MCPError(Exception):
    """Protocol-level failure reported to the client as a JSON-RPC error."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class MCPServer:
    """
    MCP Server exposing registered tools.

    Provides MCP protocol implementation with:
    - initialize / ping
    - tools/list and tools/call
    - strict argument validation for tools registered with a pydantic model
    """

    LATEST_PROTOCOL_VERSION = "2025-06-18"
    SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05", "2024-10-07")

    def __init__(self, name: str, version: str):
        """
        Initialize MCP server.

        Args:
            name: Server name reported in serverInfo
            version: Server version reported in serverInfo
        """
        self.name = name
        self.version = version

        # Tool registry
        self._tools: dict[str, dict[str, Any]] = {}

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def register_tool(
        self,
        name: str,
        description: str,
        handler: ToolHandler,
        input_schema: dict[str, Any] | None = None,
        arguments_model: type[BaseModel] | None = None,
    ) -> None:
        """
        Register a tool.

        Args:
            name: Tool name
            description: Human readable description
            handler: Coroutine called as handler(ctx, **arguments)
            input_schema: JSON schema reported by tools/list
            arguments_model: Optional model validating arguments (strict) before the handler runs;
                its JSON schema is used when input_schema is not given
        """
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")

        if input_schema is None:
            input_schema = arguments_model.model_json_schema() if arguments_model else {"type": "object"}

        self._tools[name] = {
            "name": name,
            "description": description,
            "input_schema": input_schema,
            "arguments_model": arguments_model,
            "handler": handler,
        }

    def register_tools(self, tools: list[dict[str, Any]]) -> None:
        """Register tool definitions given as dicts."""
        for tool in tools:
            self.register_tool(
                tool["name"],
                tool.get("description", ""),
                tool["handler"],
                input_schema=tool.get("input_schema"),
                arguments_model=tool.get("arguments_model"),
            )

    async def handle_message(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """
        Handle an incoming MCP message.

        Args:
            message: JSON-RPC request or notification

        Returns:
            JSON-RPC response or None for notifications
        """
        method = message.get("method")
        params = message.get("params") or {}
        msg_id = message.get("id")

        if "id" not in message:
            # Notification - no response
            logger.debug(f"Received MCP notification: {method}")
            return None

        logger.debug(f"Handling MCP message: {method}")

        try:
            if not isinstance(params, dict):
                raise MCPError(INVALID_PARAMS, "Invalid params: expected an object")

            if method == "initialize":
                result = await self._handle_initialize(params)
            elif method == "ping":
                result = {}
            elif method == "tools/list":
                result = await self._handle_list_tools(params)
            elif method == "tools/call":
                result = await self._handle_call_tool(params)
            else:
                raise MCPError(METHOD_NOT_FOUND, f"Method not found: {method}")

            return self._success_response(msg_id, result)

        except MCPError as e:
            return self._error_response(msg_id, e.code, e.message, e.data)
        except Exception as e:
            logger.error(f"Error handling message: {e}", exc_info=True)
            return self._error_response(msg_id, INTERNAL_ERROR, str(e))

    async def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle initialize request."""
        requested = params.get("protocolVersion")
        protocol_version = requested if requested in self.SUPPORTED_PROTOCOL_VERSIONS else self.LATEST_PROTOCOL_VERSION

        return {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": self.name, "version": self.version},
            "capabilities": {"tools": {"listChanged": True}},
        }

    async def _handle_list_tools(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle tools/list request."""
        tools = [
            {"name": tool["name"], "description": tool["description"], "inputSchema": tool["input_schema"]}
            for tool in self._tools.values()
        ]
        return {"tools": tools}

    async def _handle_call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle tools/call request."""
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}

        if not tool_name:
            raise MCPError(INVALID_PARAMS, "Tool name is required")

        tool = self._tools.get(tool_name)
        if not tool:
            raise MCPError(INVALID_PARAMS, f"Unknown tool: {tool_name}")

        if not isinstance(arguments, dict):
            raise MCPError(INVALID_PARAMS, "Tool arguments must be an object")

        kwargs = arguments
        model = tool["arguments_model"]
        if model is not None:
            try:
                validated = model.model_validate(arguments, strict=True)
            except ValidationError as e:
                return self._error_result(f"Invalid arguments for tool {tool_name}: {self._format_errors(e)}")
            kwargs = dict(validated)

        ctx = {
            "server_name": self.name,
            "tool_name": tool_name,
            "trigger_metadata": {"name": tool_name, "mcptoolargs": arguments},
        }

        try:
            result = await tool["handler"](ctx, **kwargs)
        except Exception as e:
            logger.error(f"Tool {tool_name} failed: {e}", exc_info=True)
            return self._error_result(f"Error executing tool {tool_name}: {e}")

        return {"content": [{"type": "text", "text": self._format_result(result)}]}

    def _format_result(self, result: Any) -> str:
        """Format result as string."""
        if isinstance(result, str):
            return result
        return json.dumps(result, indent=2, default=str)

    def _format_errors(self, error: ValidationError) -> str:
        """Compact one-line summary of validation errors."""
        parts = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"]) or "arguments"
            parts.append(f"{location}: {item['msg']}")
        return "; ".join(parts)

    def _error_result(self, text: str) -> dict[str, Any]:
        """Tool result flagged as an error."""
        return {"content": [{"type": "text", "text": text}], "isError": True}

    def _success_response(self, msg_id: Any, result: Any) -> dict[str, Any]:
        """Create success response."""
        return {"jsonrpc": "2.0", "id": msg_id, "result": result}

    def _error_response(self, msg_id: Any, code: int, message: str, data: Any = None) -> dict[str, Any]:
        """Create error response."""
        error = {"code": code, "message": message}
        if data:
            error["data"] = data

        return {"jsonrpc": "2.0", "id": msg_id, "error": error}
