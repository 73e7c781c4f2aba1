"""Attachment loading shared by all transports."""

from __future__ import annotations

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from gmail_mcp.mail.errors import AttachmentReadError

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class Attachment:
    filename: str
    mime_type: str
    content: bytes

    @property
    def maintype(self) -> str:
        return self.mime_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        return self.mime_type.split("/", 1)[1]


def guess_mime_type(path: str) -> str:
    """Infer a MIME type from the file extension, falling back to octet-stream."""
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type or DEFAULT_MIME_TYPE


async def load_attachment(path: str) -> Attachment:
    """Read *path* fully in a worker thread.

    Raises:
        AttachmentReadError: If the file is missing, a directory, or unreadable.
    """
    file_path = Path(path)
    try:
        content = await asyncio.to_thread(file_path.read_bytes)
    except OSError as exc:
        raise AttachmentReadError(path, exc.strerror or str(exc)) from exc
    except ValueError as exc:
        # embedded NUL bytes in the path
        raise AttachmentReadError(path, str(exc)) from exc

    return Attachment(
        filename=file_path.name or "attachment",
        mime_type=guess_mime_type(path),
        content=content,
    )
