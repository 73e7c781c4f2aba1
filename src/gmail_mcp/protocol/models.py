"""Protocol models — JSON-RPC 2.0 messages and tool descriptors.

Implements the message format used by the Model Context Protocol for the
handshake (``initialize``), tool discovery (``tools/list``) and execution
(``tools/call``).
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from gmail_mcp.protocol.errors import DecodeError

JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification.

    ``id`` is kept opaque so it can be echoed back verbatim.
    """

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: Any = None
    id: Any = None

    @property
    def is_notification(self) -> bool:
        """A message without an ``id`` never gets a response."""
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message carrying exactly one of result/error."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> JsonRpcResponse:
        has_result = self.result is not None
        if has_result == (self.error is not None):
            msg = "A response carries exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: Any, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, error: JsonRpcError) -> JsonRpcResponse:
        return cls(id=request_id, error=error)

    def to_line(self) -> str:
        """Serialize as one compact JSON line (without the trailing newline)."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def decode_request(line: str) -> JsonRpcRequest:
    """Decode one input line into a :class:`JsonRpcRequest`.

    Raises:
        DecodeError: If the line is not a JSON object with a string ``method``.
    """
    try:
        raw = json.loads(line)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise DecodeError(f"Expected a JSON object, got {type(raw).__name__}")

    try:
        return JsonRpcRequest.model_validate(raw)
    except ValidationError as exc:
        raise DecodeError(f"Invalid request: {exc.errors()[0]['msg']}") from exc


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
