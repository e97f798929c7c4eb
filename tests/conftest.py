"""
Pytest configuration and fixtures
"""
from typing import Dict, Iterable, List, Optional, Union

import pytest
import structlog

from docker_relay.common.config import ExecutorConfig
from docker_relay.common.exceptions import CommandExecutionError
from docker_relay.core.command_executor import CommandResult, DockerCommandExecutor


class FakeExecutor(DockerCommandExecutor):
    """Records command lines instead of running docker

    ``responses`` maps a command prefix to the stdout (or a full CommandResult)
    returned for it; any command containing one of ``failures`` raises the
    same error a failing docker call would.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, Union[str, CommandResult]]] = None,
        failures: Iterable[str] = (),
    ):
        super().__init__(ExecutorConfig())
        self.commands: List[str] = []
        self.responses = dict(responses or {})
        self.failures = list(failures)

    async def run(self, command: str) -> CommandResult:
        self.commands.append(command)

        for marker in self.failures:
            if marker in command:
                raise CommandExecutionError(
                    f"Docker command failed: Command failed with exit code 1: {command}\nboom",
                    command=command,
                    exit_code=1,
                    stderr="boom",
                )

        for prefix, response in self.responses.items():
            if command.startswith(prefix):
                if isinstance(response, CommandResult):
                    return response
                return CommandResult(command=command, exit_code=0, stdout=response)

        return CommandResult(command=command, exit_code=0, stdout="ok\n")


@pytest.fixture(autouse=True)
def reset_structlog():
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()
