"""ToolRegistry — the static catalog of tools served by this process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from gmail_mcp.protocol.errors import InvalidParamsError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Iterator

    from gmail_mcp.protocol.models import ToolDescriptor

    ToolHandler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class Tool:
    """A descriptor paired with its argument model and async handler.

    The handler receives the validated ``arguments_model`` instance and
    returns the confirmation text placed in the ``tools/call`` result.
    """

    descriptor: ToolDescriptor
    arguments_model: type[BaseModel]
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name

    def parse_arguments(self, raw: dict[str, Any]) -> BaseModel:
        """Validate raw ``arguments`` against the tool's argument model.

        Raises:
            InvalidParamsError: Naming the first missing or malformed field.
        """
        try:
            return self.arguments_model.model_validate(raw)
        except ValidationError as exc:
            raise InvalidParamsError(_describe_validation_error(exc)) from exc


class ToolRegistry:
    """Immutable name-to-tool map, built once at startup.

    Usage::

        registry = ToolRegistry([build_send_email_tool(transport)])
        tool = registry.get("send_email")
        catalog = registry.descriptors()
    """

    def __init__(self, tools: Iterable[Tool]) -> None:
        table: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in table:
                msg = f"Duplicate tool name: {tool.name}"
                raise ValueError(msg)
            table[tool.name] = tool
        self._tools = table

    def get(self, name: str) -> Tool | None:
        """Look up a tool by exact name."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def descriptors(self) -> list[ToolDescriptor]:
        """Return the full catalog in registration order."""
        return [tool.descriptor for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "arguments"
    if first["type"] == "missing":
        return f"Missing required argument: '{field}'"
    return f"Invalid argument '{field}': {first['msg']}"
