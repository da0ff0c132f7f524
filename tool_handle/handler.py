from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from tool_handle.handle import ToolHandle

if TYPE_CHECKING:
    from tool_handle.context import ToolContext


class ToolHandler(ABC):
    """Abstract base class for tool handlers (protocol handlers)."""

    handle_model: ClassVar[type[ToolHandle]] = ToolHandle
    """Handle model this handler accepts. Raw handle mappings are parsed with it."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique handler name, matched against ToolHandle.handler."""
        ...

    @abstractmethod
    async def execute(self, context: ToolContext, handle: ToolHandle, args: Any) -> Any:
        """Execute a tool handle with the given arguments.

        Failures propagate to the caller of execute_tool_handle unchanged.
        """
        ...
