"""End-to-end: raw protocol lines through run_server with a stub transport."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

from _fakes import FakeTransport, LinesReader

from gmail_mcp.app import run_server
from gmail_mcp.config import ServerSettings
from gmail_mcp.mail.smtp import SmtpTransport


async def _session(*lines: str, transport: Any = None) -> list[dict[str, Any]]:
    out = io.StringIO()
    await run_server(
        ServerSettings(smtp_username="me@gmail.com", smtp_password="pw"),
        reader=LinesReader(*lines),
        writer=out,
        transport=transport or FakeTransport(),
    )
    return [json.loads(line) for line in out.getvalue().splitlines()]


class TestStdioSession:
    async def test_full_handshake_and_call(self) -> None:
        transport = FakeTransport(token="<id@gmail.com>")
        responses = await _session(
            '{"jsonrpc":"2.0","method":"initialize","id":0,"params":{"protocolVersion":"2024-11-05"}}',
            '{"jsonrpc":"2.0","method":"notifications/initialized"}',
            '{"jsonrpc":"2.0","method":"tools/list","id":1}',
            '{"jsonrpc":"2.0","method":"tools/call","id":2,"params":{"name":"send_email",'
            '"arguments":{"to":"a@b.com","subject":"Hi","body":"Hello"}}}',
            transport=transport,
        )

        assert [r["id"] for r in responses] == [0, 1, 2]
        assert responses[0]["result"]["capabilities"] == {"tools": {}}
        tools = responses[1]["result"]["tools"]
        assert len(tools) == 1
        assert tools[0]["name"] == "send_email"
        assert "to" in tools[0]["inputSchema"]["required"]
        assert "Email sent successfully" in responses[2]["result"]["content"][0]["text"]
        assert "<id@gmail.com>" in responses[2]["result"]["content"][0]["text"]
        assert transport.sent[0].to == "a@b.com"

    async def test_initialize_twice_identical(self) -> None:
        responses = await _session(
            '{"jsonrpc":"2.0","method":"initialize","id":1}',
            '{"jsonrpc":"2.0","method":"initialize","id":2}',
        )
        first, second = (r["result"] for r in responses)
        assert json.dumps(first["serverInfo"]) == json.dumps(second["serverInfo"])
        assert json.dumps(first["capabilities"]) == json.dumps(second["capabilities"])

    async def test_malformed_then_valid(self) -> None:
        responses = await _session(
            '{"jsonrpc":"2.0","method":',
            '{"jsonrpc":"2.0","method":"tools/list","id":"after"}',
        )
        assert len(responses) == 1
        assert responses[0]["id"] == "after"

    async def test_error_codes(self) -> None:
        responses = await _session(
            '{"jsonrpc":"2.0","method":"unknown/method","id":1}',
            '{"jsonrpc":"2.0","method":"tools/call","id":2}',
            '{"jsonrpc":"2.0","method":"tools/call","id":3,"params":{"name":"fax","arguments":{}}}',
            '{"jsonrpc":"2.0","method":"tools/call","id":4,"params":{"name":"send_email","arguments":{}}}',
        )
        codes = [r["error"]["code"] for r in responses]
        assert codes == [-32601, -32602, -32601, -32602]
        assert "fax" in responses[2]["error"]["message"]
        assert "to" in responses[3]["error"]["message"]

    async def test_missing_attachment_with_real_smtp_transport(self, tmp_path: Path) -> None:
        transport = SmtpTransport("me@gmail.com", "pw")
        missing = tmp_path / "missing.pdf"
        request = {
            "jsonrpc": "2.0",
            "method": "tools/call",
            "id": 2,
            "params": {
                "name": "send_email",
                "arguments": {"to": "a@b.com", "subject": "Hi", "attachment_path": str(missing)},
            },
        }
        responses = await _session(
            json.dumps(request),
            '{"jsonrpc":"2.0","method":"ping","id":3}',
            transport=transport,
        )

        assert responses[0]["error"]["code"] == -32000
        assert "Failed to read attachment" in responses[0]["error"]["message"]
        assert responses[1] == {"jsonrpc": "2.0", "id": 3, "result": {}}

    async def test_nul_byte_attachment_path_with_real_smtp_transport(self, tmp_path: Path) -> None:
        request = {
            "jsonrpc": "2.0",
            "method": "tools/call",
            "id": 2,
            "params": {
                "name": "send_email",
                "arguments": {"to": "a@b.com", "attachment_path": f"{tmp_path}/a\x00b.pdf"},
            },
        }
        responses = await _session(
            json.dumps(request),
            '{"jsonrpc":"2.0","method":"ping","id":3}',
            transport=SmtpTransport("me@gmail.com", "pw"),
        )

        assert responses[0]["error"]["code"] == -32000
        assert "Failed to read attachment" in responses[0]["error"]["message"]
        assert responses[1] == {"jsonrpc": "2.0", "id": 3, "result": {}}

    async def test_subject_line_break_with_real_smtp_transport(self) -> None:
        request = {
            "jsonrpc": "2.0",
            "method": "tools/call",
            "id": 2,
            "params": {
                "name": "send_email",
                "arguments": {"to": "a@b.com", "subject": "Hi\r\nBcc: victim@example.com"},
            },
        }
        responses = await _session(json.dumps(request), transport=SmtpTransport("me@gmail.com", "pw"))

        assert responses[0]["error"]["code"] == -32000
        assert "Invalid subject" in responses[0]["error"]["message"]

    async def test_notification_errors_silent(self) -> None:
        responses = await _session(
            '{"jsonrpc":"2.0","method":"does/not/exist"}',
            '{"jsonrpc":"2.0","method":"tools/call","params":{"name":"nope"}}',
        )
        assert responses == []
