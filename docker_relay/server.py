# docker_relay/server.py
"""
MCP server for docker-relay

Registers the docker tools and the help resource on a FastMCP server that
speaks line-delimited JSON-RPC over stdio. A handler that reports an error
raises ToolError so the client receives an error result; the server itself
keeps running.
"""
from typing import Annotated, Dict, List, Literal, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from .common.config import RelayConfig, get_config
from .core.command_executor import DockerCommandExecutor
from .core.structured_output import ContainerSpec, HealthCheck, ResourceLimits, SecurityOptions, ToolResponse
from .modules.backup import DockerBackup
from .modules.help import HELP_TEXT, HELP_URI
from .modules.monitoring import DockerMonitor
from .modules.projects import ProjectLabeler, ProjectManager
from .modules.remote import RemoteDockerManager
from .modules.tools import DockerTools

logger = structlog.get_logger()

INSTRUCTIONS = (
    "Run docker and docker-compose commands from natural language or explicit arguments. "
    f"Read {HELP_URI} for the supported phrases."
)


def _relay(response: ToolResponse) -> str:
    if response.is_error:
        raise ToolError(response.text)
    return response.text


class RelayServices:
    """Handler objects sharing one executor, so the host override applies everywhere"""

    def __init__(self, config: RelayConfig, executor: Optional[DockerCommandExecutor] = None):
        self.executor = executor or DockerCommandExecutor(config.executor)
        labeler = ProjectLabeler(config.project_label_key)
        self.tools = DockerTools(self.executor, labeler=labeler)
        self.projects = ProjectManager(self.executor, labeler)
        self.remote = RemoteDockerManager(self.executor)
        self.monitor = DockerMonitor(self.executor)
        self.backup = DockerBackup(self.executor, self.projects, config.backup)


def create_server(
    config: Optional[RelayConfig] = None, executor: Optional[DockerCommandExecutor] = None
) -> FastMCP:
    """Build the FastMCP server with every tool and the help resource registered"""
    config = config or get_config()
    services = RelayServices(config, executor)
    mcp = FastMCP(config.server_name, instructions=INSTRUCTIONS)

    @mcp.tool(
        name="execute_docker_command",
        title="Execute Docker Command",
        description="Execute Docker commands using natural language or direct commands",
    )
    async def execute_docker_command(
        command: Annotated[str, Field(description="Natural language command or direct Docker command to execute")],
    ) -> str:
        return _relay(await services.tools.execute_docker_command(command))

    @mcp.tool(
        name="manage_containers",
        title="Manage Docker Containers",
        description="Manage Docker containers (list, start, stop, remove, restart)",
    )
    async def manage_containers(
        action: Annotated[Literal["list", "start", "stop", "remove", "restart"], Field(description="Action to perform on containers")],
        container: Annotated[Optional[str], Field(description="Container name or ID (required for start, stop, remove, restart)")] = None,
        all: Annotated[bool, Field(description="Include stopped containers when listing")] = False,
    ) -> str:
        return _relay(await services.tools.manage_containers(action, container, all))

    @mcp.tool(
        name="manage_images",
        title="Manage Docker Images",
        description="Manage Docker images (list, pull, remove, build)",
    )
    async def manage_images(
        action: Annotated[Literal["list", "pull", "remove", "build"], Field(description="Action to perform on images")],
        image: Annotated[Optional[str], Field(description="Image name or ID (required for pull, remove, build)")] = None,
        tag: Annotated[Optional[str], Field(description="Image tag")] = None,
        dockerfile: Annotated[Optional[str], Field(description="Build context path for build")] = None,
    ) -> str:
        return _relay(await services.tools.manage_images(action, image, tag, dockerfile))

    @mcp.tool(
        name="docker_info",
        title="Docker System Information",
        description="Get Docker system information and statistics",
    )
    async def docker_info(
        type: Annotated[Literal["info", "version", "stats", "disk_usage"], Field(description="Type of information to retrieve")],
    ) -> str:
        return _relay(await services.tools.docker_info(type))

    @mcp.tool(
        name="manage_volumes",
        title="Docker Volume Management",
        description="Manage Docker volumes (list, create, remove, inspect, prune)",
    )
    async def manage_volumes(
        action: Annotated[Literal["list", "create", "remove", "inspect", "prune"], Field(description="Action to perform on volumes")],
        volume: Annotated[Optional[str], Field(description="Volume name (required for create, remove, inspect)")] = None,
        driver: Annotated[Optional[str], Field(description="Volume driver (optional for create)")] = None,
    ) -> str:
        return _relay(await services.tools.manage_volumes(action, volume, driver))

    @mcp.tool(
        name="manage_networks",
        title="Docker Network Management",
        description="Manage Docker networks (list, create, remove, inspect, connect, disconnect, prune)",
    )
    async def manage_networks(
        action: Annotated[
            Literal["list", "create", "remove", "inspect", "connect", "disconnect", "prune"],
            Field(description="Action to perform on networks"),
        ],
        network: Annotated[Optional[str], Field(description="Network name")] = None,
        container: Annotated[Optional[str], Field(description="Container name (required for connect, disconnect)")] = None,
        driver: Annotated[Optional[str], Field(description="Network driver (bridge, overlay, host, none)")] = None,
    ) -> str:
        return _relay(await services.tools.manage_networks(action, network, container, driver))

    @mcp.tool(
        name="create_container",
        title="Create and Run Docker Containers",
        description="Create and run Docker containers with advanced options",
    )
    async def create_container(
        image: Annotated[str, Field(description="Docker image to run")],
        name: Annotated[Optional[str], Field(description="Container name")] = None,
        ports: Annotated[Optional[List[str]], Field(description="Port mappings, e.g. ['8080:80']")] = None,
        volumes: Annotated[Optional[List[str]], Field(description="Volume mounts, e.g. ['/host/path:/container/path']")] = None,
        environment: Annotated[Optional[Dict[str, str]], Field(description="Environment variables")] = None,
        network: Annotated[Optional[str], Field(description="Network to connect to")] = None,
        detached: Annotated[bool, Field(description="Run in detached mode")] = True,
        interactive: Annotated[bool, Field(description="Run in interactive mode")] = False,
        command: Annotated[Optional[str], Field(description="Command to run in the container")] = None,
        workdir: Annotated[Optional[str], Field(description="Working directory")] = None,
        restart: Annotated[
            Optional[Literal["no", "on-failure", "always", "unless-stopped"]], Field(description="Restart policy")
        ] = None,
        health_check: Annotated[Optional[HealthCheck], Field(description="Health check configuration")] = None,
        resources: Annotated[Optional[ResourceLimits], Field(description="Resource constraints")] = None,
        security: Annotated[Optional[SecurityOptions], Field(description="Security options")] = None,
        labels: Annotated[Optional[Dict[str, str]], Field(description="Container labels")] = None,
        hostname: Annotated[Optional[str], Field(description="Container hostname")] = None,
        domainname: Annotated[Optional[str], Field(description="Container domain name")] = None,
        project_name: Annotated[Optional[str], Field(description="Project name for resource grouping")] = None,
    ) -> str:
        spec = ContainerSpec(
            image=image,
            name=name,
            ports=ports or [],
            volumes=volumes or [],
            environment=environment or {},
            network=network,
            detached=detached,
            interactive=interactive,
            command=command,
            workdir=workdir,
            restart=restart,
            health_check=health_check,
            resources=resources,
            security=security,
            labels=labels or {},
            hostname=hostname,
            domainname=domainname,
            project_name=project_name,
        )
        return _relay(await services.tools.create_container(spec))

    @mcp.tool(
        name="docker_registry",
        title="Docker Registry Operations",
        description="Search Docker Hub, login/logout, push/pull/tag operations",
    )
    async def docker_registry(
        action: Annotated[Literal["search", "login", "logout", "push", "pull", "tag"], Field(description="Registry action to perform")],
        query: Annotated[Optional[str], Field(description="Search query (required for search)")] = None,
        image: Annotated[Optional[str], Field(description="Image name (required for push, pull, tag)")] = None,
        tag: Annotated[Optional[str], Field(description="Image tag")] = None,
        new_tag: Annotated[Optional[str], Field(description="New tag name (required for tag)")] = None,
        registry: Annotated[Optional[str], Field(description="Registry URL (optional for login/logout)")] = None,
        username: Annotated[Optional[str], Field(description="Username for login")] = None,
        password: Annotated[Optional[str], Field(description="Password for login")] = None,
    ) -> str:
        return _relay(
            await services.tools.docker_registry(action, query, image, tag, new_tag, registry, username, password)
        )

    @mcp.tool(
        name="docker_monitoring",
        title="Docker Monitoring and Troubleshooting",
        description="Monitor containers, get logs, inspect resources, and troubleshoot issues",
    )
    async def docker_monitoring(
        action: Annotated[
            Literal["logs", "inspect", "exec", "top", "port", "stats", "events", "diff"],
            Field(description="Monitoring action to perform"),
        ],
        container: Annotated[Optional[str], Field(description="Container name or ID")] = None,
        follow: Annotated[bool, Field(description="Follow log output")] = False,
        tail: Annotated[Optional[int], Field(description="Number of lines to show from the end of the logs")] = None,
        command: Annotated[Optional[str], Field(description="Command to execute in the container (for exec)")] = None,
        since: Annotated[Optional[str], Field(description="Show logs since timestamp")] = None,
        until: Annotated[Optional[str], Field(description="Show logs until timestamp")] = None,
    ) -> str:
        return _relay(await services.tools.docker_monitoring(action, container, follow, tail, command, since, until))

    @mcp.tool(
        name="docker_compose",
        title="Docker Compose Management",
        description="Manage Docker Compose services",
    )
    async def docker_compose(
        action: Annotated[Literal["up", "down", "logs", "ps", "restart", "build"], Field(description="Docker Compose action to perform")],
        service: Annotated[Optional[str], Field(description="Specific service name")] = None,
        detach: Annotated[bool, Field(description="Run in detached mode")] = True,
        build: Annotated[bool, Field(description="Build images before starting (for up)")] = False,
    ) -> str:
        return _relay(await services.tools.docker_compose(action, service, detach, build))

    @mcp.tool(
        name="docker_compose_advanced",
        title="Advanced Docker Compose Manager",
        description="Manage Docker projects with natural language using a plan+apply workflow",
    )
    async def docker_compose_advanced(
        action: Annotated[Literal["plan", "apply", "destroy", "status"], Field(description="Action to perform")],
        project_name: Annotated[str, Field(description="Unique name of the project")],
        containers: Annotated[Optional[str], Field(description="Describe the containers you want (required for plan)")] = None,
        command: Annotated[
            Optional[Literal["help", "apply", "down", "ps", "quiet", "verbose", "destroy"]],
            Field(description="Shortcut command"),
        ] = None,
    ) -> str:
        return _relay(await services.projects.docker_compose_advanced(action, project_name, containers, command))

    @mcp.tool(
        name="docker_remote_connection",
        title="Remote Docker Connection",
        description="Connect to remote Docker hosts via SSH or configure the Docker host",
    )
    async def docker_remote_connection(
        action: Annotated[Literal["connect", "disconnect", "status", "test"], Field(description="Connection action")],
        host: Annotated[Optional[str], Field(description="Docker host URL, e.g. ssh://user@host or tcp://host:2376")] = None,
        user: Annotated[Optional[str], Field(description="SSH username")] = None,
        key_path: Annotated[Optional[str], Field(description="Path to SSH private key")] = None,
    ) -> str:
        return _relay(await services.remote.docker_remote_connection(action, host, user, key_path))

    @mcp.tool(
        name="docker_monitoring_advanced",
        title="Advanced Docker Monitoring",
        description="Enhanced monitoring with health checks, events, and detailed statistics",
    )
    async def docker_monitoring_advanced(
        action: Annotated[
            Literal["live_stats", "health", "events", "system_info", "performance"],
            Field(description="Monitoring action"),
        ],
        container: Annotated[Optional[str], Field(description="Container name (for container-specific actions)")] = None,
        since: Annotated[Optional[str], Field(description="Time period for events, e.g. 1h, 30m")] = None,
        format: Annotated[Literal["table", "json"], Field(description="Output format")] = "table",
    ) -> str:
        return _relay(await services.monitor.docker_monitoring_advanced(action, container, since, format))

    @mcp.tool(
        name="docker_backup_migration",
        title="Docker Backup and Migration",
        description="Backup containers, volumes, and entire projects for migration",
    )
    async def docker_backup_migration(
        action: Annotated[
            Literal["backup_container", "export_project", "list_backups", "cleanup_backups"],
            Field(description="Backup action"),
        ],
        container_name: Annotated[Optional[str], Field(description="Container name (required for backup_container)")] = None,
        project_name: Annotated[Optional[str], Field(description="Project name (required for export_project)")] = None,
        backup_path: Annotated[Optional[str], Field(description="Backup destination path")] = None,
        days: Annotated[Optional[int], Field(description="Days to keep backups (for cleanup)")] = None,
    ) -> str:
        return _relay(
            await services.backup.docker_backup_migration(action, container_name, project_name, backup_path, days)
        )

    @mcp.resource(
        HELP_URI,
        name="docker-help",
        title="Docker Commands Help",
        description="Docker commands and natural language examples",
        mime_type="text/plain",
    )
    def docker_help() -> str:
        return HELP_TEXT

    logger.debug("Server created", name=config.server_name, docker_host=services.executor.docker_host)
    return mcp


def serve(config: Optional[RelayConfig] = None) -> None:
    """Run the server over stdio until the client disconnects"""
    config = config or get_config()
    server = create_server(config)
    logger.info("Docker MCP Server is running", name=config.server_name, version=config.version)
    try:
        server.run(transport="stdio")
    finally:
        logger.info("Shutting down Docker MCP Server")
