# docker_relay/modules/tools.py
"""
Fixed-template docker tools

Each tool fills one command template from its typed arguments, runs it and
relays the output. A missing required argument raises ValidationError before
anything is executed.
"""
from typing import List, Optional

import structlog

from ..cli.utils.decorators import tool_errors
from ..common.exceptions import ValidationError
from ..core.command_executor import CommandResult, DockerCommandExecutor
from ..core.structured_output import ContainerSpec, ToolResponse
from ..core.translator import CommandTranslator, get_translator
from .projects import ProjectLabeler

logger = structlog.get_logger()

CONTAINER_ACTIONS = ("list", "start", "stop", "remove", "restart")
IMAGE_ACTIONS = ("list", "pull", "remove", "build")
INFO_TYPES = ("info", "version", "stats", "disk_usage")
VOLUME_ACTIONS = ("list", "create", "remove", "inspect", "prune")
NETWORK_ACTIONS = ("list", "create", "remove", "inspect", "connect", "disconnect", "prune")
REGISTRY_ACTIONS = ("search", "login", "logout", "push", "pull", "tag")
MONITORING_ACTIONS = ("logs", "inspect", "exec", "top", "port", "stats", "events", "diff")
COMPOSE_ACTIONS = ("up", "down", "logs", "ps", "restart", "build")

INFO_COMMANDS = {
    "info": "docker system info",
    "version": "docker --version && docker-compose --version",
    "stats": "docker stats --no-stream",
    "disk_usage": "docker system df",
}


def _require(value: Optional[str], message: str, field: str) -> str:
    if not value:
        raise ValidationError(message, field=field)
    return value


def _check_action(action: str, allowed: tuple) -> None:
    if action not in allowed:
        raise ValidationError(f"Unknown action '{action}'. Expected one of: {', '.join(allowed)}", field="action")


def _relay(header: str, result: CommandResult) -> ToolResponse:
    """Success text: header, stdout, and stderr as warnings when present"""
    text = f"{header}:\n\n{result.stdout}"
    if result.stderr:
        text += f"\nWarnings:\n{result.stderr}"
    return ToolResponse.ok(text)


def _with_tag(image: str, tag: Optional[str]) -> str:
    return f"{image}:{tag}" if tag else image


class DockerTools:
    """The fixed-template tool handlers"""

    def __init__(
        self,
        executor: DockerCommandExecutor,
        translator: Optional[CommandTranslator] = None,
        labeler: Optional[ProjectLabeler] = None,
    ):
        self.executor = executor
        self.translator = translator or get_translator()
        self.labeler = labeler or ProjectLabeler()

    @tool_errors("Error executing Docker command")
    async def execute_docker_command(self, command: str) -> ToolResponse:
        docker_command = self.translator.translate(command)
        logger.debug("Translated request", request=command, command=docker_command)
        result = await self.executor.run(docker_command)

        text = f"Executed: {docker_command}\n\nOutput:\n{result.stdout}"
        if result.stderr:
            text += f"\nErrors:\n{result.stderr}"
        return ToolResponse.ok(text)

    @tool_errors("Error managing containers")
    async def manage_containers(
        self, action: str, container: Optional[str] = None, all: bool = False
    ) -> ToolResponse:
        _check_action(action, CONTAINER_ACTIONS)

        if action == "list":
            command = "docker ps -a" if all else "docker ps"
        else:
            name = _require(container, f"Container name or ID is required for {action} action", "container")
            verb = "rm" if action == "remove" else action
            command = f"docker {verb} {name}"

        return _relay(f"Container {action} completed", await self.executor.run(command))

    @tool_errors("Error managing images")
    async def manage_images(
        self,
        action: str,
        image: Optional[str] = None,
        tag: Optional[str] = None,
        dockerfile: Optional[str] = None,
    ) -> ToolResponse:
        _check_action(action, IMAGE_ACTIONS)

        if action == "list":
            command = "docker images"
        elif action == "pull":
            command = f"docker pull {_with_tag(_require(image, 'Image name is required for pull action', 'image'), tag)}"
        elif action == "remove":
            command = f"docker rmi {_require(image, 'Image name or ID is required for remove action', 'image')}"
        else:
            name = _require(image, "Image name is required for build action", "image")
            # dockerfile doubles as the build context path
            command = f"docker build -t {_with_tag(name, tag)} {dockerfile or '.'}"

        return _relay(f"Image {action} completed", await self.executor.run(command))

    @tool_errors("Error getting Docker information")
    async def docker_info(self, type: str) -> ToolResponse:
        if type not in INFO_COMMANDS:
            raise ValidationError(
                f"Unknown information type '{type}'. Expected one of: {', '.join(INFO_TYPES)}", field="type"
            )
        return _relay(f"Docker {type}", await self.executor.run(INFO_COMMANDS[type]))

    @tool_errors("Error managing volumes")
    async def manage_volumes(
        self, action: str, volume: Optional[str] = None, driver: Optional[str] = None
    ) -> ToolResponse:
        _check_action(action, VOLUME_ACTIONS)

        if action == "list":
            command = "docker volume ls"
        elif action == "prune":
            command = "docker volume prune -f"
        else:
            name = _require(volume, f"Volume name is required for {action} action", "volume")
            if action == "create":
                driver_arg = f" --driver {driver}" if driver else ""
                command = f"docker volume create{driver_arg} {name}"
            else:
                verb = "rm" if action == "remove" else action
                command = f"docker volume {verb} {name}"

        return _relay(f"Volume {action} completed", await self.executor.run(command))

    @tool_errors("Error managing networks")
    async def manage_networks(
        self,
        action: str,
        network: Optional[str] = None,
        container: Optional[str] = None,
        driver: Optional[str] = None,
    ) -> ToolResponse:
        _check_action(action, NETWORK_ACTIONS)

        if action == "list":
            command = "docker network ls"
        elif action == "prune":
            command = "docker network prune -f"
        elif action in ("connect", "disconnect"):
            if not network or not container:
                raise ValidationError(f"Network and container names are required for {action} action", field="network")
            command = f"docker network {action} {network} {container}"
        else:
            name = _require(network, f"Network name is required for {action} action", "network")
            if action == "create":
                driver_arg = f" --driver {driver}" if driver else ""
                command = f"docker network create{driver_arg} {name}"
            else:
                verb = "rm" if action == "remove" else action
                command = f"docker network {verb} {name}"

        return _relay(f"Network {action} completed", await self.executor.run(command))

    @tool_errors("Error creating container")
    async def create_container(self, spec: ContainerSpec) -> ToolResponse:
        _require(spec.image, "Image is required to create a container", "image")
        command = spec.to_run_command()
        if spec.project_name:
            command = self.labeler.add_project_label(command, spec.project_name)
        result = await self.executor.run(command)

        text = f"Container created successfully:\n\nCommand: {command}\n\nOutput:\n{result.stdout}"
        if result.stderr:
            text += f"\nWarnings:\n{result.stderr}"
        return ToolResponse.ok(text)

    @tool_errors("Error with registry operation")
    async def docker_registry(
        self,
        action: str,
        query: Optional[str] = None,
        image: Optional[str] = None,
        tag: Optional[str] = None,
        new_tag: Optional[str] = None,
        registry: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> ToolResponse:
        _check_action(action, REGISTRY_ACTIONS)
        registry_arg = f" {registry}" if registry else ""

        if action == "search":
            command = f"docker search {_require(query, 'Search query is required', 'query')}"
        elif action == "login":
            command = f"docker login{registry_arg}"
            if username and password:
                command += f" -u {username} -p {password}"
        elif action == "logout":
            command = f"docker logout{registry_arg}"
        elif action == "tag":
            if not image or not new_tag:
                raise ValidationError("Image name and new tag are required for tag action", field="new_tag")
            command = f"docker tag {_with_tag(image, tag)} {new_tag}"
        else:
            name = _require(image, f"Image name is required for {action}", "image")
            command = f"docker {action} {_with_tag(name, tag)}"

        return _relay(f"Registry {action} completed", await self.executor.run(command))

    @tool_errors("Error with monitoring operation")
    async def docker_monitoring(
        self,
        action: str,
        container: Optional[str] = None,
        follow: bool = False,
        tail: Optional[int] = None,
        command: Optional[str] = None,
        since: Optional[str] = None,
        until: Optional[str] = None,
    ) -> ToolResponse:
        _check_action(action, MONITORING_ACTIONS)

        if action == "stats":
            docker_command = f"docker stats --no-stream {container}" if container else "docker stats --no-stream"
        elif action == "events":
            docker_command = "docker events --since 1h"
            if container:
                docker_command += f" --filter container={container}"
        else:
            name = _require(container, f"Container name is required for {action}", "container")
            if action == "logs":
                flags: List[str] = []
                if follow:
                    flags.append("-f")
                if tail:
                    flags.append(f"--tail {tail}")
                if since:
                    flags.append(f"--since {since}")
                if until:
                    flags.append(f"--until {until}")
                docker_command = " ".join(["docker logs", *flags, name])
            elif action == "exec":
                docker_command = f"docker exec -it {name} {command or 'bash'}"
            else:
                docker_command = f"docker {action} {name}"

        return _relay(f"Monitoring {action} completed", await self.executor.run(docker_command))

    @tool_errors("Error with Docker Compose")
    async def docker_compose(
        self,
        action: str,
        service: Optional[str] = None,
        detach: bool = True,
        build: bool = False,
    ) -> ToolResponse:
        _check_action(action, COMPOSE_ACTIONS)
        service_arg = f" {service}" if service else ""

        if action == "up":
            command = f"docker-compose up{' -d' if detach else ''}{' --build' if build else ''}{service_arg}"
        elif action == "ps":
            command = "docker-compose ps"
        else:
            command = f"docker-compose {action}{service_arg}"

        return _relay(f"Docker Compose {action} completed", await self.executor.run(command))
