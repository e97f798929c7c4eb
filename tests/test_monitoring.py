"""
Tests for advanced monitoring
"""
import json

import pytest

from docker_relay.modules.monitoring import DockerMonitor

from .conftest import FakeExecutor


@pytest.mark.asyncio
async def test_health_summarises_inspect_state():
    inspect = [
        {
            "State": {
                "Status": "running",
                "StartedAt": "2024-01-01T00:00:00Z",
                "FinishedAt": "",
                "Health": {"Status": "healthy"},
            }
        }
    ]
    executor = FakeExecutor(responses={"docker inspect web": json.dumps(inspect)})

    response = await DockerMonitor(executor).docker_monitoring_advanced("health", container="web")

    assert response.text == (
        "## Container Health Check\n\nContainer: web\nStatus: running\nHealth: healthy\n"
        "Started: 2024-01-01T00:00:00Z\nFinished: N/A"
    )


@pytest.mark.asyncio
async def test_health_without_healthcheck():
    executor = FakeExecutor(responses={"docker inspect db": json.dumps([{"State": {"Status": "exited"}}])})

    response = await DockerMonitor(executor).docker_monitoring_advanced("health", container="db")

    assert "Health: none" in response.text


@pytest.mark.asyncio
async def test_health_requires_container(executor):
    response = await DockerMonitor(executor).docker_monitoring_advanced("health")

    assert response.text == "Error with advanced monitoring: Container name is required for health check"
    assert executor.commands == []


@pytest.mark.asyncio
async def test_events_default_window(executor):
    response = await DockerMonitor(executor).docker_monitoring_advanced("events")

    assert executor.commands == ["docker events --since 1h --until now"]
    assert response.text.startswith("## Docker System Events (last 1h)")


@pytest.mark.asyncio
async def test_live_stats_formats(executor):
    monitor = DockerMonitor(executor)
    await monitor.docker_monitoring_advanced("live_stats", container="api")
    await monitor.docker_monitoring_advanced("live_stats", format="json")

    assert executor.commands[0].startswith('docker stats --no-stream --format "table {{.Container}}')
    assert executor.commands[0].endswith(" api")
    assert executor.commands[1] == 'docker stats --no-stream --format "{{json .}}"'


@pytest.mark.asyncio
async def test_performance_overview(executor):
    response = await DockerMonitor(executor).docker_monitoring_advanced("performance")

    assert "docker system df -v" in executor.commands
    assert "docker version" in executor.commands
    assert len(executor.commands) == 3
    assert "### Disk Usage" in response.text
    assert "### Running Containers" in response.text


@pytest.mark.asyncio
async def test_failure_is_reported():
    executor = FakeExecutor(failures=["docker system info"])

    response = await DockerMonitor(executor).docker_monitoring_advanced("system_info")

    assert response.is_error
    assert response.text.startswith("Error with advanced monitoring: Docker command failed:")
