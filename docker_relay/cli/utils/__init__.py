"""CLI utilities"""

from .decorators import tool_errors, handle_exceptions, async_command

__all__ = ["tool_errors", "handle_exceptions", "async_command"]
