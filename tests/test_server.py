"""
Tests for the MCP protocol surface
"""
import pytest
from mcp.server.fastmcp.exceptions import ToolError

from docker_relay.common.config import RelayConfig
from docker_relay.modules.help import HELP_URI
from docker_relay.server import create_server

EXPECTED_TOOLS = {
    "execute_docker_command",
    "manage_containers",
    "manage_images",
    "docker_info",
    "manage_volumes",
    "manage_networks",
    "create_container",
    "docker_registry",
    "docker_monitoring",
    "docker_compose",
    "docker_compose_advanced",
    "docker_remote_connection",
    "docker_monitoring_advanced",
    "docker_backup_migration",
}


@pytest.fixture
def server(executor):
    return create_server(RelayConfig(), executor=executor)


@pytest.mark.asyncio
async def test_all_tools_registered(server):
    tools = await server.list_tools()

    assert {tool.name for tool in tools} == EXPECTED_TOOLS


@pytest.mark.asyncio
async def test_tool_schemas_use_snake_case(server):
    tools = {tool.name: tool for tool in await server.list_tools()}

    backup_props = tools["docker_backup_migration"].inputSchema["properties"]
    assert {"container_name", "project_name", "backup_path", "days"} <= set(backup_props)
    assert tools["docker_compose_advanced"].inputSchema["required"] == ["action", "project_name"]


@pytest.mark.asyncio
async def test_help_resource(server):
    resources = await server.list_resources()
    assert [str(r.uri).rstrip("/") for r in resources] == [HELP_URI]

    contents = list(await server.read_resource(HELP_URI))
    assert "docker_backup_migration" in contents[0].content


@pytest.mark.asyncio
async def test_tool_call_runs_through_shared_executor(server, executor):
    await server.call_tool("manage_containers", {"action": "list", "all": True})
    await server.call_tool("docker_remote_connection", {"action": "connect", "host": "tcp://remote:2376"})

    assert executor.commands == ["docker ps -a", "docker version"]
    assert executor.docker_host == "tcp://remote:2376"


@pytest.mark.asyncio
async def test_tool_error_becomes_protocol_error(server, executor):
    with pytest.raises(ToolError, match="Error managing containers: Container name or ID is required"):
        await server.call_tool("manage_containers", {"action": "stop"})

    assert executor.commands == []
