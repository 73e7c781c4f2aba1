"""Token stores — where the Gmail API strategy caches its OAuth token.

Injected into :class:`~gmail_mcp.mail.gmail_api.GmailApiTransport` so the
cache can be faked in tests.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_CACHE = "token_cache.json"


@runtime_checkable
class TokenStore(Protocol):
    """Get/put access to a cached authorized-user token."""

    def get(self) -> dict[str, Any] | None: ...
    def put(self, data: dict[str, Any]) -> None: ...


class MemoryTokenStore:
    """Keeps the token in memory for the life of the process."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = dict(data) if data is not None else None

    def get(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data is not None else None

    def put(self, data: dict[str, Any]) -> None:
        self._data = dict(data)


class FileTokenStore:
    """Persists the token as JSON, readable only by the owner."""

    def __init__(self, path: Path | str = DEFAULT_TOKEN_CACHE) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> dict[str, Any] | None:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt token cache at %s", self._path)
            return None

        if not isinstance(data, dict):
            logger.warning("Ignoring token cache at %s: not a JSON object", self._path)
            return None
        return data

    def put(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        logger.info("Cached OAuth token at %s", self._path)
