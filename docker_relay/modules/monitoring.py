# docker_relay/modules/monitoring.py
"""
Advanced monitoring: live stats, health, events, system info, performance
"""
import asyncio
import json
from typing import Optional

import structlog

from ..cli.utils.decorators import tool_errors
from ..common.exceptions import CommandExecutionError, ValidationError
from ..core.command_executor import DockerCommandExecutor
from ..core.structured_output import ToolResponse

logger = structlog.get_logger()

MONITORING_ACTIONS = ("live_stats", "health", "events", "system_info", "performance")

STATS_TABLE = '"table {{.Container}}\\t{{.CPUPerc}}\\t{{.MemUsage}}\\t{{.NetIO}}\\t{{.BlockIO}}"'
STATS_JSON = '"{{json .}}"'
RUNNING_TABLE = "'table {{.Names}}\\t{{.Status}}\\t{{.Ports}}'"
DEFAULT_EVENTS_SINCE = "1h"


def _block(text: str) -> str:
    return f"```\n{text}\n```"


class DockerMonitor:
    """Read-only views over the docker daemon"""

    def __init__(self, executor: DockerCommandExecutor):
        self.executor = executor

    async def live_stats(self, container: Optional[str] = None, output_format: str = "table") -> str:
        template = STATS_JSON if output_format == "json" else STATS_TABLE
        command = f"docker stats --no-stream --format {template}"
        if container:
            command += f" {container}"
        result = await self.executor.run(command)
        return result.stdout

    async def events(self, since: str = DEFAULT_EVENTS_SINCE) -> str:
        result = await self.executor.run(f"docker events --since {since} --until now")
        return result.stdout

    async def container_health(self, container: str) -> str:
        """Summarise State and State.Health from docker inspect"""
        result = await self.executor.run(f"docker inspect {container}")
        try:
            state = json.loads(result.stdout)[0]["State"]
        except (json.JSONDecodeError, IndexError, KeyError, TypeError) as e:
            raise CommandExecutionError(
                f"Failed to get health info: unexpected inspect output ({e})", command=f"docker inspect {container}"
            ) from e

        health = state.get("Health") or {"Status": "none"}
        return (
            f"Container: {container}\n"
            f"Status: {state.get('Status')}\n"
            f"Health: {health.get('Status')}\n"
            f"Started: {state.get('StartedAt')}\n"
            f"Finished: {state.get('FinishedAt') or 'N/A'}"
        )

    async def performance(self) -> str:
        disk_usage, containers, version = await asyncio.gather(
            self.executor.run("docker system df -v"),
            self.executor.run(f"docker ps --format {RUNNING_TABLE}"),
            self.executor.run("docker version"),
        )
        return (
            "## Docker Performance Overview\n\n"
            f"### Disk Usage\n{_block(disk_usage.stdout)}\n\n"
            f"### Running Containers\n{_block(containers.stdout)}\n\n"
            f"### Version\n{_block(version.stdout)}"
        )

    @tool_errors("Error with advanced monitoring")
    async def docker_monitoring_advanced(
        self,
        action: str,
        container: Optional[str] = None,
        since: Optional[str] = None,
        format: str = "table",
    ) -> ToolResponse:
        if action == "live_stats":
            stats = await self.live_stats(container, format)
            return ToolResponse.ok(f"## Live Docker Statistics\n\n{_block(stats)}")

        if action == "health":
            if not container:
                raise ValidationError("Container name is required for health check", field="container")
            return ToolResponse.ok(f"## Container Health Check\n\n{await self.container_health(container)}")

        if action == "events":
            window = since or DEFAULT_EVENTS_SINCE
            events = await self.events(window)
            return ToolResponse.ok(f"## Docker System Events (last {window})\n\n{_block(events)}")

        if action == "system_info":
            result = await self.executor.run("docker system info")
            return ToolResponse.ok(f"## Docker System Information\n\n{_block(result.stdout)}")

        if action == "performance":
            return ToolResponse.ok(await self.performance())

        raise ValidationError(
            f"Unknown action '{action}'. Expected one of: {', '.join(MONITORING_ACTIONS)}", field="action"
        )
