"""Translation, execution and shared models"""

from .command_executor import CommandResult, DockerCommandExecutor, redact_command
from .translator import CommandTranslator, get_translator, translate

__all__ = [
    "CommandResult",
    "DockerCommandExecutor",
    "redact_command",
    "CommandTranslator",
    "get_translator",
    "translate",
]
