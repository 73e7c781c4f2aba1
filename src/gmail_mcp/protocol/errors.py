"""Shared error types for the protocol layer."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gmail_mcp.protocol.models import JsonRpcError


class ErrorCode(IntEnum):
    """Caller-visible JSON-RPC error codes."""

    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    OPERATION_FAILED = -32000


class DecodeError(Exception):
    """A raw input line could not be decoded into a request."""


class RpcError(Exception):
    """Base error for failures reported back to the caller as a JSON-RPC error."""

    code: ErrorCode = ErrorCode.OPERATION_FAILED

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)

    def to_error(self) -> JsonRpcError:
        """Return the structured error value for this failure."""
        from gmail_mcp.protocol.models import JsonRpcError

        return JsonRpcError(code=int(self.code), message=self.message, data=self.data)


class MethodNotFoundError(RpcError):
    """Unknown protocol method or unknown tool name."""

    code = ErrorCode.METHOD_NOT_FOUND


class InvalidParamsError(RpcError):
    """Missing or malformed ``params`` or tool arguments."""

    code = ErrorCode.INVALID_PARAMS


class OperationFailedError(RpcError):
    """A tool ran but its underlying operation failed."""

    code = ErrorCode.OPERATION_FAILED
