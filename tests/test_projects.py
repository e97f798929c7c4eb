"""
Tests for project labels and the plan/apply workflow
"""
import json

import pytest

from docker_relay.common.exceptions import ProjectError
from docker_relay.core.structured_output import ComposeProject, ProjectResources, ServiceConfig
from docker_relay.modules.projects import (
    ProjectLabeler,
    ProjectManager,
    generate_plan,
    order_services,
    parse_description,
)

from .conftest import FakeExecutor

LABEL = "mcp-server-docker.project"


def _json_lines(*rows):
    return "\n".join(json.dumps(row) for row in rows) + "\n"


@pytest.fixture
def labeler():
    return ProjectLabeler(LABEL)


class TestProjectLabeler:
    def test_label_inserted_after_creating_subcommand(self, labeler):
        assert labeler.add_project_label("docker run -d nginx", "shop") == (
            'docker run --label "mcp-server-docker.project=shop" -d nginx'
        )
        assert labeler.add_project_label("docker network create shop-network", "shop") == (
            'docker network create --label "mcp-server-docker.project=shop" shop-network'
        )
        assert labeler.add_project_label("docker volume create shop-data", "shop") == (
            'docker volume create --label "mcp-server-docker.project=shop" shop-data'
        )

    def test_other_commands_unchanged(self, labeler):
        assert labeler.add_project_label("docker ps -a", "shop") == "docker ps -a"


class TestDescriptionParsing:
    def test_wordpress_brings_mysql_and_volume(self):
        project = parse_description("WordPress blog", "blog")

        assert set(project.services) == {"wordpress", "mysql"}
        assert project.services["wordpress"].ports == ["9000:80"]
        assert project.volumes == {"mysql-data": {}}
        assert order_services(project) == ["mysql", "wordpress"]

    def test_wp_matches_only_as_a_word(self):
        assert "wordpress" in parse_description("a wp site", "x").services
        assert parse_description("wpa supplicant", "x").services == {}

    def test_nginx_port_redis_postgres(self):
        project = parse_description("nginx on port 8080 with redis and postgres", "web")

        assert project.services["nginx"].ports == ["8080:80"]
        assert project.services["redis"].image == "redis:alpine"
        assert "postgres-data" in project.volumes

    def test_circular_dependencies_are_rejected(self):
        project = ComposeProject(
            name="loop",
            services={
                "a": ServiceConfig(image="a", depends_on=["b"]),
                "b": ServiceConfig(image="b", depends_on=["a"]),
            },
        )
        with pytest.raises(ProjectError):
            order_services(project)


class TestPlanText:
    def test_plan_lists_missing_resources(self):
        project = parse_description("wordpress", "blog")
        plan = generate_plan(project, ProjectResources(name="blog"))

        assert plan.startswith("## Plan\n\nI plan to take the following actions:\n\n")
        assert "1. CREATE container blog-mysql from mysql:8.0" in plan
        assert "2. CREATE container blog-wordpress from wordpress:latest" in plan
        assert "3. CREATE volume blog-mysql-data" in plan
        assert "4. CREATE network blog-network" in plan

    def test_up_to_date_project(self):
        project = parse_description("redis", "cache")
        current = ProjectResources(name="cache", containers=[{"Names": "cache-redis"}])

        assert generate_plan(project, current) == "No changes to make; project is up-to-date."


@pytest.mark.asyncio
async def test_resources_listed_by_label(labeler):
    executor = FakeExecutor(
        responses={
            "docker ps -a": _json_lines({"ID": "abc", "Names": "shop-web", "State": "running"}),
            "docker network ls": _json_lines({"Name": "shop-network"}),
        },
        failures=["docker volume ls"],
    )
    resources = await ProjectManager(executor, labeler).get_project_resources("shop")

    assert resources.container_names() == ["shop-web"]
    assert resources.network_names() == ["shop-network"]
    assert resources.volumes == []
    assert 'docker ps -a --filter "label=mcp-server-docker.project=shop" --format "{{json .}}"' in executor.commands


@pytest.mark.asyncio
async def test_plan_then_apply(labeler):
    executor = FakeExecutor(responses={"docker ps -a": "", "docker network ls": "", "docker volume ls": ""})
    manager = ProjectManager(executor, labeler)

    plan = await manager.docker_compose_advanced("plan", "blog", containers="wordpress with mysql")
    assert plan.text.startswith("## Docker Compose Manager - Project: blog\n\n## Plan")
    assert "**Containers:** 0" in plan.text

    executor.commands.clear()
    applied = await manager.docker_compose_advanced("apply", "blog")

    created = [c for c in executor.commands if "--filter" not in c]
    assert created == [
        'docker network create --label "mcp-server-docker.project=blog" blog-network',
        'docker volume create --label "mcp-server-docker.project=blog" blog-mysql-data',
        'docker run --label "mcp-server-docker.project=blog" -d --name blog-mysql '
        "-v blog-mysql-data:/var/lib/mysql -e MYSQL_DATABASE=wordpress -e MYSQL_USER=wordpress "
        "-e MYSQL_PASSWORD=wordpress -e MYSQL_ROOT_PASSWORD=rootpassword --network blog-network mysql:8.0",
        'docker run --label "mcp-server-docker.project=blog" -d --name blog-wordpress -p 9000:80 '
        "-e WORDPRESS_DB_HOST=mysql -e WORDPRESS_DB_USER=wordpress -e WORDPRESS_DB_PASSWORD=wordpress "
        "-e WORDPRESS_DB_NAME=wordpress --network blog-network wordpress:latest",
    ]
    assert applied.text.startswith("## Apply Complete\n\n✅ Created network blog-network")
    assert applied.text.endswith("Project blog has been successfully deployed!")


@pytest.mark.asyncio
async def test_apply_without_plan(executor, labeler):
    response = await ProjectManager(executor, labeler).docker_compose_advanced("apply", "ghost")

    assert response.is_error
    assert response.text == "Error with Docker Compose operation: No plan found for project ghost"


@pytest.mark.asyncio
async def test_apply_failure_is_wrapped(labeler):
    executor = FakeExecutor(responses={"docker ps -a": "", "docker network ls": "", "docker volume ls": ""})
    manager = ProjectManager(executor, labeler)
    await manager.plan("cache", "redis")
    executor.failures.append("docker run")

    response = await manager.docker_compose_advanced("apply", "cache")

    assert response.text.startswith("Error with Docker Compose operation: Failed to apply plan: Docker command failed:")


@pytest.mark.asyncio
async def test_plan_requires_description(executor, labeler):
    response = await ProjectManager(executor, labeler).docker_compose_advanced("plan", "blog")

    assert response.text == "Error with Docker Compose operation: Container description is required for planning"
    assert executor.commands == []


@pytest.mark.asyncio
async def test_last_plan_wins(labeler):
    executor = FakeExecutor(responses={"docker ps -a": "", "docker network ls": "", "docker volume ls": ""})
    manager = ProjectManager(executor, labeler)

    await manager.plan("site", "nginx")
    await manager.plan("site", "redis")

    assert set(manager.projects["site"].services) == {"redis"}


@pytest.mark.asyncio
async def test_destroy_reports_each_resource(labeler):
    executor = FakeExecutor(
        responses={
            "docker ps -a": _json_lines({"ID": "c1", "Names": "shop-web"}),
            "docker network ls": _json_lines({"Name": "shop-network"}),
            "docker volume ls": _json_lines({"Name": "shop-data"}),
        },
        failures=["docker volume rm"],
    )
    response = await ProjectManager(executor, labeler).docker_compose_advanced("destroy", "shop")

    assert "docker stop c1" in executor.commands
    assert "docker rm c1" in executor.commands
    assert "✅ Removed container shop-web" in response.text
    assert "❌ Failed to remove volume shop-data" in response.text
    assert "✅ Removed network shop-network" in response.text
    assert not response.is_error


@pytest.mark.asyncio
async def test_status_and_shortcut_command(labeler):
    executor = FakeExecutor(
        responses={
            "docker ps -a": _json_lines(
                {"Names": "shop-web", "State": "running"}, {"Names": "shop-db", "State": "exited"}
            ),
            "docker network ls": "",
            "docker volume ls": "",
        }
    )
    response = await ProjectManager(executor, labeler).docker_compose_advanced("plan", "shop", command="ps")

    assert "**Containers:** 2 (1 running)" in response.text
    assert "- shop-web: running" in response.text
    assert "### Networks:\nNone" in response.text
