"""Tests for the send_email tool."""

from __future__ import annotations

import pytest
from _fakes import FakeTransport

from gmail_mcp.mail.errors import InvalidAddressError, MailAuthError
from gmail_mcp.protocol.errors import OperationFailedError
from gmail_mcp.tools.send_email import (
    DEFAULT_SUBJECT,
    SEND_EMAIL_DESCRIPTOR,
    SendEmailArgs,
    build_send_email_tool,
    default_registry,
)


class TestSendEmailArgs:
    def test_defaults(self) -> None:
        args = SendEmailArgs(to="a@b.com")
        assert args.subject == DEFAULT_SUBJECT == "(No Subject)"
        assert args.body == ""
        assert args.attachment_path is None

    def test_unknown_keys_ignored(self) -> None:
        args = SendEmailArgs.model_validate({"to": "a@b.com", "cc": "c@d.com"})
        assert not hasattr(args, "cc")


class TestDescriptor:
    def test_schema(self) -> None:
        schema = SEND_EMAIL_DESCRIPTOR.input_schema
        assert schema["required"] == ["to"]
        assert set(schema["properties"]) == {"to", "subject", "body", "attachment_path"}


class TestHandler:
    async def test_delivers_and_confirms(self) -> None:
        transport = FakeTransport(token="abc123")
        tool = build_send_email_tool(transport)
        text = await tool.handler(SendEmailArgs(to="a@b.com", subject="Hi", body="Hello"))
        assert text == "Email sent successfully. Message ID: abc123"
        sent = transport.sent[0]
        assert (sent.to, sent.subject, sent.body) == ("a@b.com", "Hi", "Hello")

    async def test_passes_attachment_path(self) -> None:
        transport = FakeTransport()
        tool = build_send_email_tool(transport)
        await tool.handler(SendEmailArgs(to="a@b.com", attachment_path="/tmp/report.pdf"))
        assert transport.sent[0].attachment_path == "/tmp/report.pdf"

    @pytest.mark.parametrize(
        "error",
        [InvalidAddressError("to", "nope"), MailAuthError("bad login")],
    )
    async def test_mail_errors_become_operation_failures(self, error: Exception) -> None:
        tool = build_send_email_tool(FakeTransport(error=error))
        with pytest.raises(OperationFailedError, match="Failed to send email") as exc_info:
            await tool.handler(SendEmailArgs(to="a@b.com"))
        assert str(error) in exc_info.value.message

    async def test_unexpected_errors_propagate(self) -> None:
        tool = build_send_email_tool(FakeTransport(error=RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            await tool.handler(SendEmailArgs(to="a@b.com"))


def test_default_registry_has_send_email() -> None:
    registry = default_registry(FakeTransport())
    assert registry.names() == ["send_email"]
