"""JSON-RPC protocol engine for the stdio server."""

from gmail_mcp.protocol.dispatcher import PROTOCOL_VERSION, RequestDispatcher
from gmail_mcp.protocol.errors import (
    DecodeError,
    ErrorCode,
    InvalidParamsError,
    MethodNotFoundError,
    OperationFailedError,
    RpcError,
)
from gmail_mcp.protocol.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolDescriptor,
    decode_request,
)
from gmail_mcp.protocol.server import ProtocolLoop, StdinReader

__all__ = [
    "PROTOCOL_VERSION",
    "DecodeError",
    "ErrorCode",
    "InvalidParamsError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "OperationFailedError",
    "ProtocolLoop",
    "RequestDispatcher",
    "RpcError",
    "StdinReader",
    "ToolDescriptor",
    "decode_request",
]
