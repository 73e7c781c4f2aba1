"""Tests for protocol error types and codes."""

from gmail_mcp.protocol.errors import (
    ErrorCode,
    InvalidParamsError,
    MethodNotFoundError,
    OperationFailedError,
    RpcError,
)


class TestErrorCodes:
    def test_values(self) -> None:
        assert ErrorCode.METHOD_NOT_FOUND == -32601
        assert ErrorCode.INVALID_PARAMS == -32602
        assert ErrorCode.OPERATION_FAILED == -32000


class TestRpcError:
    def test_method_not_found_to_error(self) -> None:
        err = MethodNotFoundError("Unknown tool: nope").to_error()
        assert err.code == -32601
        assert err.message == "Unknown tool: nope"
        assert err.data is None

    def test_invalid_params_code(self) -> None:
        assert InvalidParamsError("x").to_error().code == -32602

    def test_operation_failed_carries_data(self) -> None:
        err = OperationFailedError("boom", data={"retry": False}).to_error()
        assert err.code == -32000
        assert err.data == {"retry": False}

    def test_subclasses_share_base(self) -> None:
        for cls in (MethodNotFoundError, InvalidParamsError, OperationFailedError):
            assert issubclass(cls, RpcError)

    def test_str_is_message(self) -> None:
        assert str(InvalidParamsError("Missing params")) == "Missing params"
