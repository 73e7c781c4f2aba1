"""Shared fixtures."""

from __future__ import annotations

import pytest
from _fakes import FakeTransport

from gmail_mcp.protocol.dispatcher import RequestDispatcher
from gmail_mcp.tools.send_email import default_registry


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def dispatcher(fake_transport: FakeTransport) -> RequestDispatcher:
    return RequestDispatcher(default_registry(fake_transport))
