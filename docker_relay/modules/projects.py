# docker_relay/modules/projects.py
"""
Project-label bookkeeping and the plan/apply workflow

Every resource created for a project carries the label
``mcp-server-docker.project=<name>``; listing by that label is how the current
state of a project is discovered. A plan compares a description of the desired
services against that state, apply creates what is missing.
"""
import asyncio
import json
import re
from typing import Any, Dict, List, Optional

import structlog

from ..cli.utils.decorators import tool_errors
from ..common.config import get_config
from ..common.exceptions import CommandExecutionError, ProjectError, ValidationError
from ..core.command_executor import DockerCommandExecutor
from ..core.structured_output import ComposeProject, ContainerSpec, ProjectResources, ServiceConfig, ToolResponse

logger = structlog.get_logger()

PROJECT_ACTIONS = ("plan", "apply", "destroy", "status")

# Shortcut commands accepted alongside the action
SHORTCUT_ACTIONS = {
    "apply": "apply",
    "destroy": "destroy",
    "down": "destroy",
    "ps": "status",
}

PROJECT_HELP = """## Docker Compose Manager

Actions:
- plan: describe the containers you want (e.g. "wordpress with mysql", "nginx on port 8080 and redis")
- apply: create the resources of the last plan
- destroy: stop and remove every resource labelled with the project
- status: show the resources currently labelled with the project

Recognised services: wordpress (with mysql), nginx, redis, postgres"""

_LABELLED_CREATE = re.compile(r"(docker (?:run|create|network create|volume create))")


class ProjectLabeler:
    """Builds and inserts the project label"""

    def __init__(self, label_key: Optional[str] = None):
        self.label_key = label_key or get_config().project_label_key

    def label(self, project_name: str) -> str:
        return f"{self.label_key}={project_name}"

    def add_project_label(self, command: str, project_name: str) -> str:
        """Insert --label after the creating sub-command; other commands are returned unchanged"""
        return _LABELLED_CREATE.sub(rf'\1 --label "{self.label(project_name)}"', command, count=1)


def parse_description(description: str, project_name: str) -> ComposeProject:
    """Recognise well-known services in a free-text description"""
    text = description.lower()
    services: Dict[str, ServiceConfig] = {}
    volumes: Dict[str, Dict[str, Any]] = {}

    if "wordpress" in text or re.search(r"\bwp\b", text):
        services["wordpress"] = ServiceConfig(
            image="wordpress:latest",
            ports=["9000:80"],
            environment={
                "WORDPRESS_DB_HOST": "mysql",
                "WORDPRESS_DB_USER": "wordpress",
                "WORDPRESS_DB_PASSWORD": "wordpress",
                "WORDPRESS_DB_NAME": "wordpress",
            },
            depends_on=["mysql"],
        )
        services["mysql"] = ServiceConfig(
            image="mysql:8.0",
            environment={
                "MYSQL_DATABASE": "wordpress",
                "MYSQL_USER": "wordpress",
                "MYSQL_PASSWORD": "wordpress",
                "MYSQL_ROOT_PASSWORD": "rootpassword",
            },
            volumes=["mysql-data:/var/lib/mysql"],
        )
        volumes["mysql-data"] = {}

    if "nginx" in text:
        port = re.search(r"port\s+(\d+)", text)
        services["nginx"] = ServiceConfig(image="nginx:latest", ports=[f"{port.group(1) if port else '80'}:80"])

    if "redis" in text:
        services["redis"] = ServiceConfig(image="redis:alpine", ports=["6379:6379"])

    if "postgres" in text:
        services["postgres"] = ServiceConfig(
            image="postgres:15",
            environment={"POSTGRES_DB": "myapp", "POSTGRES_USER": "user", "POSTGRES_PASSWORD": "password"},
            volumes=["postgres-data:/var/lib/postgresql/data"],
        )
        volumes["postgres-data"] = {}

    return ComposeProject(name=project_name, services=services, volumes=volumes)


def order_services(project: ComposeProject) -> List[str]:
    """Service names with every dependency ahead of its dependents"""
    ordered: List[str] = []
    visiting: set = set()

    def visit(name: str) -> None:
        if name in ordered:
            return
        if name in visiting:
            raise ProjectError(f"Circular dependency involving service {name}", project=project.name)
        visiting.add(name)
        for dependency in project.services[name].depends_on:
            # dependencies outside the project are left to docker
            if dependency in project.services:
                visit(dependency)
        visiting.discard(name)
        ordered.append(name)

    for service_name in project.services:
        visit(service_name)
    return ordered


def generate_plan(project: ComposeProject, current: ProjectResources) -> str:
    """Plan text listing the CREATE actions needed to reach the described state"""
    actions: List[str] = []

    existing_containers = current.container_names()
    for service_name in order_services(project):
        container_name = project.container_name(service_name)
        if container_name not in existing_containers:
            actions.append(f"CREATE container {container_name} from {project.services[service_name].image}")

    existing_volumes = current.volume_names()
    for volume in project.volumes:
        volume_name = project.volume_name(volume)
        if volume_name not in existing_volumes:
            actions.append(f"CREATE volume {volume_name}")

    if project.needs_network and project.network_name not in current.network_names():
        actions.append(f"CREATE network {project.network_name}")

    if not actions:
        return "No changes to make; project is up-to-date."

    numbered = "\n".join(f"{i}. {action}" for i, action in enumerate(actions, start=1))
    return (
        "## Plan\n\nI plan to take the following actions:\n\n"
        f"{numbered}\n\n"
        "Respond `apply` to apply this plan. Otherwise, provide feedback and I will present you with an updated plan."
    )


class ProjectManager:
    """Plan/apply/destroy/status for labelled docker projects"""

    def __init__(self, executor: DockerCommandExecutor, labeler: Optional[ProjectLabeler] = None):
        self.executor = executor
        self.labeler = labeler or ProjectLabeler()
        self.projects: Dict[str, ComposeProject] = {}

    async def _list_labelled(self, kind: str, listing: str, project_name: str) -> List[Dict[str, Any]]:
        command = f'{listing} --filter "label={self.labeler.label(project_name)}" --format "{{{{json .}}}}"'
        try:
            result = await self.executor.run(command)
            return [json.loads(line) for line in result.stdout.splitlines() if line.strip()]
        except (CommandExecutionError, json.JSONDecodeError) as e:
            logger.warning("Could not list project resources", project=project_name, kind=kind, error=str(e))
            return []

    async def get_project_resources(self, project_name: str) -> ProjectResources:
        """Containers, networks and volumes carrying the project label"""
        containers, networks, volumes = await asyncio.gather(
            self._list_labelled("containers", "docker ps -a", project_name),
            self._list_labelled("networks", "docker network ls", project_name),
            self._list_labelled("volumes", "docker volume ls", project_name),
        )
        return ProjectResources(name=project_name, containers=containers, networks=networks, volumes=volumes)

    async def plan(self, project_name: str, description: str) -> str:
        project = parse_description(description, project_name)
        if not project.services:
            raise ValidationError(
                "No known services found in the description (wordpress, nginx, redis, postgres)",
                field="containers",
            )
        self.projects[project_name] = project

        current = await self.get_project_resources(project_name)
        plan_text = generate_plan(project, current)
        logger.info("Project planned", project=project_name, services=list(project.services))

        return (
            f"## Docker Compose Manager - Project: {project_name}\n\n{plan_text}\n\n"
            "### Resources Currently Present:\n"
            f"**Containers:** {len(current.containers)}\n"
            f"**Networks:** {len(current.networks)}\n"
            f"**Volumes:** {len(current.volumes)}"
        )

    def _run_spec(self, project: ComposeProject, service_name: str) -> ContainerSpec:
        service = project.services[service_name]
        volumes = []
        for mount in service.volumes:
            source, sep, target = mount.partition(":")
            # named volumes get the project prefix, bind mounts stay as written
            if sep and not source.startswith(("/", ".", "~")):
                mount = f"{project.volume_name(source)}:{target}"
            volumes.append(mount)

        return ContainerSpec(
            image=service.image,
            name=project.container_name(service_name),
            ports=service.ports,
            environment=service.environment,
            volumes=volumes,
            network=project.network_name if project.needs_network else None,
        )

    async def apply(self, project_name: str) -> str:
        project = self.projects.get(project_name)
        if project is None:
            raise ProjectError(f"No plan found for project {project_name}", project=project_name)

        current = await self.get_project_resources(project_name)
        results: List[str] = []

        try:
            if project.needs_network and project.network_name not in current.network_names():
                await self.executor.run(
                    self.labeler.add_project_label(f"docker network create {project.network_name}", project_name)
                )
                results.append(f"✅ Created network {project.network_name}")

            for volume in project.volumes:
                volume_name = project.volume_name(volume)
                if volume_name in current.volume_names():
                    continue
                await self.executor.run(
                    self.labeler.add_project_label(f"docker volume create {volume_name}", project_name)
                )
                results.append(f"✅ Created volume {volume_name}")

            for service_name in order_services(project):
                spec = self._run_spec(project, service_name)
                if spec.name in current.container_names():
                    continue
                await self.executor.run(self.labeler.add_project_label(spec.to_run_command(), project_name))
                results.append(f"✅ Created and started container {spec.name}")
        except CommandExecutionError as e:
            logger.error("Apply failed", project=project_name, error=str(e))
            raise ProjectError(f"Failed to apply plan: {e}", project=project_name) from e

        logger.info("Project applied", project=project_name, created=len(results))
        summary = "\n".join(results) or "Nothing to create; project is up-to-date."
        return f"## Apply Complete\n\n{summary}\n\nProject {project_name} has been successfully deployed!"

    async def destroy(self, project_name: str) -> str:
        resources = await self.get_project_resources(project_name)
        results: List[str] = []

        for container in resources.containers:
            name = container.get("Names") or container.get("name", "")
            container_id = container.get("ID") or container.get("id") or name
            try:
                await self.executor.run(f"docker stop {container_id}")
                await self.executor.run(f"docker rm {container_id}")
                results.append(f"✅ Removed container {name}")
            except CommandExecutionError as e:
                logger.warning("Container removal failed", project=project_name, container=name, error=str(e))
                results.append(f"❌ Failed to remove container {name}")

        for kind, names, verb in (
            ("volume", resources.volume_names(), "docker volume rm"),
            ("network", resources.network_names(), "docker network rm"),
        ):
            for name in names:
                try:
                    await self.executor.run(f"{verb} {name}")
                    results.append(f"✅ Removed {kind} {name}")
                except CommandExecutionError as e:
                    logger.warning("Resource removal failed", project=project_name, kind=kind, name=name, error=str(e))
                    results.append(f"❌ Failed to remove {kind} {name}")

        self.projects.pop(project_name, None)
        return "## Destroy Complete\n\n" + "\n".join(results) + f"\n\nProject {project_name} has been destroyed."

    async def status(self, project_name: str) -> str:
        resources = await self.get_project_resources(project_name)
        running = sum(1 for c in resources.containers if c.get("State") == "running")

        containers = "\n".join(
            f"- {c.get('Names') or c.get('name', '')}: {c.get('State') or c.get('status', '')}"
            for c in resources.containers
        )
        networks = "\n".join(f"- {name}" for name in resources.network_names())
        volumes = "\n".join(f"- {name}" for name in resources.volume_names())

        return (
            f"## Project Status: {project_name}\n\n"
            f"**Containers:** {len(resources.containers)} ({running} running)\n"
            f"**Networks:** {len(resources.networks)}\n"
            f"**Volumes:** {len(resources.volumes)}\n\n"
            f"### Containers:\n{containers or 'None'}\n\n"
            f"### Networks:\n{networks or 'None'}\n\n"
            f"### Volumes:\n{volumes or 'None'}"
        )

    @tool_errors("Error with Docker Compose operation")
    async def docker_compose_advanced(
        self,
        action: str,
        project_name: str,
        containers: Optional[str] = None,
        command: Optional[str] = None,
    ) -> ToolResponse:
        if command == "help":
            return ToolResponse.ok(PROJECT_HELP)
        action = SHORTCUT_ACTIONS.get(command, action)

        if action not in PROJECT_ACTIONS:
            raise ValidationError(f"Unknown action '{action}'. Expected one of: {', '.join(PROJECT_ACTIONS)}", field="action")
        if not project_name:
            raise ValidationError("Project name is required", field="project_name")

        if action == "plan":
            if not containers:
                raise ValidationError("Container description is required for planning", field="containers")
            return ToolResponse.ok(await self.plan(project_name, containers))
        if action == "apply":
            return ToolResponse.ok(await self.apply(project_name))
        if action == "destroy":
            return ToolResponse.ok(await self.destroy(project_name))
        return ToolResponse.ok(await self.status(project_name))
