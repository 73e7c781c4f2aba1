"""RequestDispatcher — routes one decoded request to its handler.

Failures never escape :meth:`RequestDispatcher.dispatch`: every handler
error becomes a structured :class:`JsonRpcError`, and notifications never
produce a response.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gmail_mcp.protocol.errors import (
    ErrorCode,
    InvalidParamsError,
    MethodNotFoundError,
    RpcError,
)
from gmail_mcp.protocol.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse
from gmail_mcp.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_RPC_METHOD,
    ATTR_RPC_NOTIFICATION,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from gmail_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2024-11-05"


class RequestDispatcher:
    """Maps method names to handlers; holds no per-call state.

    Usage::

        dispatcher = RequestDispatcher(registry)
        response = await dispatcher.dispatch(request)  # None for notifications
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        server_name: str = "gmail-mcp-server",
        server_version: str = "0.1.0",
    ) -> None:
        self._registry = registry
        self._server_info = {"name": server_name, "version": server_version}
        self._methods: dict[str, Callable[[Any], Awaitable[Any]]] = {
            "initialize": self._initialize,
            "notifications/initialized": self._initialized,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Handle *request*; returns ``None`` when it is a notification."""
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_RPC_NOTIFICATION, request.is_notification)

            result, error = await self._invoke(request)
            if error is not None:
                span.set_attribute(ATTR_ERROR_CODE, error.code)

        if request.is_notification:
            if error is not None:
                logger.debug("Dropping error for notification %s: %s", request.method, error.message)
            return None
        if error is not None:
            return JsonRpcResponse.failure(request.id, error)
        return JsonRpcResponse.success(request.id, result)

    async def _invoke(self, request: JsonRpcRequest) -> tuple[Any, JsonRpcError | None]:
        handler = self._methods.get(request.method)
        try:
            if handler is None:
                raise MethodNotFoundError(f"Method not found: {request.method}")
            return await handler(request.params), None
        except RpcError as exc:
            return None, exc.to_error()
        except Exception as exc:
            logger.exception("Unhandled error in %s", request.method)
            return None, JsonRpcError(
                code=int(ErrorCode.OPERATION_FAILED),
                message=f"Internal error: {exc}",
            )

    # ------------------------------------------------------------------
    # Built-in protocol methods
    # ------------------------------------------------------------------

    async def _initialize(self, _params: Any) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": dict(self._server_info),
            "capabilities": {"tools": {}},
        }

    async def _initialized(self, _params: Any) -> str:
        logger.info("Client initialized")
        return "OK"

    async def _ping(self, _params: Any) -> dict[str, Any]:
        return {}

    async def _list_tools(self, _params: Any) -> dict[str, Any]:
        return {"tools": [d.to_wire() for d in self._registry.descriptors()]}

    async def _call_tool(self, params: Any) -> dict[str, Any]:
        if params is None:
            raise InvalidParamsError("Missing params")
        if not isinstance(params, dict):
            raise InvalidParamsError("Params must be an object")

        name = params.get("name")
        if not isinstance(name, str):
            raise InvalidParamsError("Missing tool name")

        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Missing arguments")

        tool = self._registry.get(name)
        if tool is None:
            raise MethodNotFoundError(f"Unknown tool: {name}")

        with _tracer.start_as_current_span("mcp.tools.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            args = tool.parse_arguments(arguments)
            text = await tool.handler(args)

        return {"content": [{"type": "text", "text": text}]}
