# docker_relay/modules/remote.py
"""
Docker host override

The override lives on the executor and reaches docker through the child
process environment only.
"""
from typing import Optional

import structlog

from ..cli.utils.decorators import tool_errors
from ..common.exceptions import CommandExecutionError, ValidationError
from ..core.command_executor import DockerCommandExecutor
from ..core.structured_output import ToolResponse

logger = structlog.get_logger()

REMOTE_ACTIONS = ("connect", "disconnect", "status", "test")


def merge_ssh_user(host: str, user: Optional[str]) -> str:
    """ssh://host + user -> ssh://user@host; other hosts are returned as given"""
    if host.startswith("ssh://") and user:
        address = host[len("ssh://"):]
        if "@" not in address:
            return f"ssh://{user}@{address}"
    return host


class RemoteDockerManager:
    """Switches the docker host used by every subsequent call"""

    def __init__(self, executor: DockerCommandExecutor):
        self.executor = executor
        self.key_path: Optional[str] = None

    @property
    def current_host(self) -> Optional[str]:
        return self.executor.docker_host

    async def test_connection(self) -> bool:
        return await self.executor.probe("docker version")

    async def connect(self, host: str, user: Optional[str] = None, key_path: Optional[str] = None) -> str:
        if not host:
            raise ValidationError("Host is required for connection", field="host")

        target = merge_ssh_user(host, user)
        previous_host, previous_key = self.executor.docker_host, self.key_path

        self.executor.docker_host = target
        self.key_path = key_path
        if not await self.test_connection():
            self.executor.docker_host, self.key_path = previous_host, previous_key
            logger.warning("Remote connection failed", host=target, restored=previous_host)
            raise CommandExecutionError("Failed to connect to remote Docker host", command="docker version")

        logger.info("Connected to docker host", host=target)
        return (
            f"✅ Successfully connected to Docker host: {target}\n\n"
            "Use 'docker_remote_connection' with action 'status' to check connection status."
        )

    def disconnect(self) -> str:
        logger.info("Disconnected from docker host", host=self.executor.docker_host)
        self.executor.docker_host = None
        self.key_path = None
        return "✅ Disconnected from remote Docker host. Using local Docker daemon."

    async def status(self) -> str:
        connected = await self.test_connection()
        lines = [f"Docker Host: {self.current_host or 'local'}"]
        if self.key_path:
            lines.append(f"SSH Key: {self.key_path}")
        lines.append(f"Connection: {'✅ Connected' if connected else '❌ Failed'}")
        return "## Docker Connection Status\n\n" + "\n".join(lines)

    async def test(self) -> str:
        connected = await self.test_connection()
        return (
            f"## Connection Test\n\nHost: {self.current_host or 'local'}\n"
            f"Status: {'✅ Connected' if connected else '❌ Failed'}"
        )

    @tool_errors("Error with remote connection")
    async def docker_remote_connection(
        self,
        action: str,
        host: Optional[str] = None,
        user: Optional[str] = None,
        key_path: Optional[str] = None,
    ) -> ToolResponse:
        if action == "connect":
            return ToolResponse.ok(await self.connect(host, user, key_path))
        if action == "disconnect":
            return ToolResponse.ok(self.disconnect())
        if action == "status":
            return ToolResponse.ok(await self.status())
        if action == "test":
            return ToolResponse.ok(await self.test())
        raise ValidationError(f"Unknown action '{action}'. Expected one of: {', '.join(REMOTE_ACTIONS)}", field="action")
