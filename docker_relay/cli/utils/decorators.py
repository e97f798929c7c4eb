"""
Decorators for docker-relay

Error handling shared by the tool handlers and the Typer commands.
"""

import asyncio
import functools
import os
import traceback
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from rich.console import Console

from ...common.exceptions import RelayError
from ...core.structured_output import ToolResponse

logger = structlog.get_logger()

# Errors go to stderr: stdout belongs to the protocol when serving
console = Console(stderr=True)

F = TypeVar("F", bound=Callable[..., Any])


def tool_errors(prefix: str) -> Callable[[Callable[..., Awaitable[ToolResponse]]], Callable[..., Awaitable[ToolResponse]]]:
    """
    Turn exceptions raised by a tool handler into an error ToolResponse

    The message becomes "<prefix>: <error>". Relay errors are expected
    (a missing argument, a failed docker call); anything else is logged with
    its traceback before being reported the same way.

    Args:
        prefix: Error prefix of the tool, e.g. "Error managing containers"
    """

    def decorator(func: Callable[..., Awaitable[ToolResponse]]) -> Callable[..., Awaitable[ToolResponse]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ToolResponse:
            try:
                return await func(*args, **kwargs)
            except RelayError as e:
                logger.warning("Tool failed", tool=func.__name__, error=str(e))
                return ToolResponse.error(f"{prefix}: {e}")
            except Exception as e:
                logger.exception("Tool failed unexpectedly", tool=func.__name__)
                return ToolResponse.error(f"{prefix}: {e}")

        return wrapper

    return decorator


def _is_debug_mode() -> bool:
    """Check if debug mode is enabled"""
    return os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")


def handle_exceptions(func: F) -> F:
    """
    Decorator for CLI commands: print errors with Rich and return an exit code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> int:
        try:
            result = func(*args, **kwargs)
            return 0 if result is None else int(result)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            return 130
        except RelayError as e:
            console.print(f"[red]✗ {e}[/red]")
            return 1
        except Exception as e:
            console.print(f"[red]✗ Unexpected error:[/red] {e}")
            if _is_debug_mode():
                console.print("\n[dim]Full traceback:[/dim]")
                console.print(traceback.format_exc())
            return 1

    return wrapper


def async_command(func: F) -> F:
    """
    Run an async function to completion so Typer can call it
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return asyncio.run(func(*args, **kwargs))

    return wrapper
