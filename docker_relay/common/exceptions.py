# docker_relay/common/exceptions.py
"""
Docker Relay Exceptions
"""


class RelayError(Exception):
    """Base exception for docker-relay"""

    pass


class ConfigurationError(RelayError):
    """Invalid or incomplete configuration"""

    pass


class ValidationError(RelayError):
    """A required argument is missing or malformed"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class CommandExecutionError(RelayError):
    """External docker invocation failed, with context"""

    def __init__(self, message: str, command: str = None, exit_code: int = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class ProjectError(RelayError):
    """Plan/apply bookkeeping error"""

    def __init__(self, message: str, project: str = None):
        super().__init__(message)
        self.project = project


class BackupError(RelayError):
    """Backup or export failure"""

    pass
