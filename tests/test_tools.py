"""
Tests for the fixed-template tools
"""
import pytest

from docker_relay.core.command_executor import CommandResult
from docker_relay.core.structured_output import ContainerSpec, HealthCheck, ResourceLimits, SecurityOptions
from docker_relay.modules.projects import ProjectLabeler
from docker_relay.modules.tools import DockerTools

from .conftest import FakeExecutor


@pytest.fixture
def tools(executor):
    return DockerTools(executor, labeler=ProjectLabeler("mcp-server-docker.project"))


@pytest.mark.asyncio
async def test_execute_docker_command_translates_and_reports(executor, tools):
    response = await tools.execute_docker_command("show me running containers")

    assert executor.commands == ["docker ps"]
    assert not response.is_error
    assert response.text == "Executed: docker ps\n\nOutput:\nok\n"


@pytest.mark.asyncio
async def test_execute_docker_command_appends_stderr():
    executor = FakeExecutor(
        responses={"docker ps": CommandResult("docker ps", 0, stdout="CONTAINER ID\n", stderr="deprecated flag\n")}
    )
    response = await DockerTools(executor).execute_docker_command("docker ps")

    assert response.text == "Executed: docker ps\n\nOutput:\nCONTAINER ID\n\nErrors:\ndeprecated flag\n"


@pytest.mark.asyncio
async def test_execute_docker_command_reports_failure():
    executor = FakeExecutor(failures=["docker ps"])
    response = await DockerTools(executor).execute_docker_command("docker ps -a")

    assert response.is_error
    assert response.text.startswith("Error executing Docker command: Docker command failed:")


@pytest.mark.asyncio
async def test_execute_docker_command_rejects_empty_phrase(executor, tools):
    response = await tools.execute_docker_command("   ")

    assert response.is_error
    assert executor.commands == []


@pytest.mark.asyncio
async def test_manage_containers(executor, tools):
    await tools.manage_containers("list")
    await tools.manage_containers("list", all=True)
    response = await tools.manage_containers("remove", container="old-app")

    assert executor.commands == ["docker ps", "docker ps -a", "docker rm old-app"]
    assert response.text == "Container remove completed:\n\nok\n"


@pytest.mark.asyncio
async def test_missing_container_is_reported_without_running(executor, tools):
    response = await tools.manage_containers("stop")

    assert response.is_error
    assert response.text == "Error managing containers: Container name or ID is required for stop action"
    assert executor.commands == []


@pytest.mark.asyncio
async def test_manage_images(executor, tools):
    await tools.manage_images("pull", image="nginx", tag="1.25")
    await tools.manage_images("build", image="myapp", tag="v2", dockerfile="./app")
    await tools.manage_images("build", image="myapp")
    await tools.manage_images("remove", image="old")

    assert executor.commands == [
        "docker pull nginx:1.25",
        "docker build -t myapp:v2 ./app",
        "docker build -t myapp .",
        "docker rmi old",
    ]


@pytest.mark.asyncio
async def test_docker_info(executor, tools):
    response = await tools.docker_info("version")

    assert executor.commands == ["docker --version && docker-compose --version"]
    assert response.text.startswith("Docker version:\n\n")


@pytest.mark.asyncio
async def test_volumes_and_networks(executor, tools):
    await tools.manage_volumes("create", volume="data", driver="local")
    await tools.manage_volumes("prune")
    await tools.manage_networks("create", network="backend", driver="bridge")
    await tools.manage_networks("connect", network="backend", container="web")

    assert executor.commands == [
        "docker volume create --driver local data",
        "docker volume prune -f",
        "docker network create --driver bridge backend",
        "docker network connect backend web",
    ]


@pytest.mark.asyncio
async def test_network_connect_needs_both_names(executor, tools):
    response = await tools.manage_networks("disconnect", network="backend")

    assert response.text == "Error managing networks: Network and container names are required for disconnect action"
    assert executor.commands == []


@pytest.mark.asyncio
async def test_create_container_builds_full_run_line(executor, tools):
    spec = ContainerSpec(
        image="nginx:alpine",
        name="web",
        ports=["8080:80"],
        volumes=["/srv/www:/usr/share/nginx/html"],
        environment={"MODE": "prod"},
        network="frontend",
        restart="unless-stopped",
        health_check=HealthCheck(test="curl -f http://localhost/", interval="30s", retries=3),
        resources=ResourceLimits(memory="512m", cpus="0.5"),
        security=SecurityOptions(user="nginx", read_only=True, tmpfs=["/tmp"]),
        labels={"tier": "edge"},
        project_name="shop",
    )
    response = await tools.create_container(spec)

    expected = (
        'docker run --label "mcp-server-docker.project=shop" -d --name web -p 8080:80 '
        "-v /srv/www:/usr/share/nginx/html -e MODE=prod --network frontend --restart unless-stopped "
        '--health-cmd "curl -f http://localhost/" --health-interval 30s --health-retries 3 '
        "--memory 512m --cpus 0.5 --user nginx --read-only --tmpfs /tmp "
        '--label "tier=edge" nginx:alpine'
    )
    assert executor.commands == [expected]
    assert response.text.startswith(f"Container created successfully:\n\nCommand: {expected}\n\nOutput:\n")


@pytest.mark.asyncio
async def test_create_container_interactive_skips_detach(executor, tools):
    await tools.create_container(ContainerSpec(image="ubuntu", interactive=True, command="bash"))

    assert executor.commands == ["docker run -it ubuntu bash"]


@pytest.mark.asyncio
async def test_registry(executor, tools):
    await tools.docker_registry("login", registry="ghcr.io", username="me", password="secret")
    await tools.docker_registry("tag", image="app", tag="1.0", new_tag="registry/app:1.0")
    response = await tools.docker_registry("search")

    assert executor.commands == [
        "docker login ghcr.io -u me -p secret",
        "docker tag app:1.0 registry/app:1.0",
    ]
    assert response.text == "Error with registry operation: Search query is required"


@pytest.mark.asyncio
async def test_monitoring(executor, tools):
    await tools.docker_monitoring("logs", container="api", follow=True, tail=20, since="10m")
    await tools.docker_monitoring("exec", container="api")
    await tools.docker_monitoring("events", container="api")
    await tools.docker_monitoring("stats")

    assert executor.commands == [
        "docker logs -f --tail 20 --since 10m api",
        "docker exec -it api bash",
        "docker events --since 1h --filter container=api",
        "docker stats --no-stream",
    ]


@pytest.mark.asyncio
async def test_compose(executor, tools):
    await tools.docker_compose("up", service="web", detach=False, build=True)
    await tools.docker_compose("up")
    await tools.docker_compose("ps", service="web")
    response = await tools.docker_compose("logs", service="db")

    assert executor.commands == [
        "docker-compose up --build web",
        "docker-compose up -d",
        "docker-compose ps",
        "docker-compose logs db",
    ]
    assert response.text.startswith("Docker Compose logs completed:")


@pytest.mark.asyncio
async def test_unknown_action_is_reported(executor, tools):
    response = await tools.manage_volumes("explode")

    assert response.is_error
    assert response.text.startswith("Error managing volumes: Unknown action 'explode'")
