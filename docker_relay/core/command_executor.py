"""
Docker Relay Command Executor
Runs one external docker process per call and relays its output verbatim
"""

import os
import re
import asyncio
from typing import Dict, Optional
from datetime import datetime, timezone

import structlog

from ..common.config import ExecutorConfig, get_executor_config
from ..common.exceptions import CommandExecutionError

logger = structlog.get_logger()

_PASSWORD_ARG = re.compile(r"(\s--password(?:=|\s+))(\S+)")
_LOGIN_SHORT_ARG = re.compile(r"(\s-p(?:=|\s+))(\S+)")
_LOGIN = re.compile(r"\bdocker\s+login\b")


def redact_command(command: str) -> str:
    """Mask password arguments before a command line reaches the logs

    ``-p`` is only a password for ``docker login``; elsewhere it publishes ports.
    """
    command = _PASSWORD_ARG.sub(r"\1***", command)
    if _LOGIN.search(command):
        command = _LOGIN_SHORT_ARG.sub(r"\1***", command)
    return command


class CommandResult:
    """Result of command execution with metadata"""

    def __init__(
        self,
        command: str,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        execution_time: float = 0.0,
    ):
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.execution_time = execution_time
        self.success = exit_code == 0


class DockerCommandExecutor:
    """Executes docker command lines against the external CLI"""

    def __init__(self, config: Optional[ExecutorConfig] = None):
        self.config = config or get_executor_config()
        self.docker_host: Optional[str] = self.config.docker_host

    def build_env(self) -> Dict[str, str]:
        """Child process environment, with the host override applied"""
        env = dict(os.environ)
        if self.docker_host:
            env["DOCKER_HOST"] = self.docker_host
        return env

    async def run(self, command: str) -> CommandResult:
        """Execute a command line; raise CommandExecutionError unless it exits 0"""

        start_time = datetime.now(timezone.utc)
        safe_command = redact_command(command)
        logger.debug("Executing docker command", command=safe_command, docker_host=self.docker_host)

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.build_env(),
                executable=self.config.shell,
            )
        except OSError as e:
            logger.error("Docker command could not start", command=safe_command, error=str(e))
            raise CommandExecutionError(f"Docker command failed: {e}", command=command, exit_code=-1) from e

        try:
            async with asyncio.timeout(self.config.timeout):
                stdout, stderr = await process.communicate()
        except TimeoutError:
            process.kill()
            await process.wait()
            raise CommandExecutionError(
                f"Docker command failed: timed out after {self.config.timeout} seconds", command=command, exit_code=-1
            )

        result = CommandResult(
            command=command,
            exit_code=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            execution_time=(datetime.now(timezone.utc) - start_time).total_seconds(),
        )

        if not result.success:
            logger.warning(
                "Docker command failed", command=safe_command, exit_code=result.exit_code, stderr=result.stderr.strip()
            )
            detail = result.stderr.strip() or result.stdout.strip()
            raise CommandExecutionError(
                f"Docker command failed: Command failed with exit code {result.exit_code}: {safe_command}\n{detail}",
                command=command,
                exit_code=result.exit_code,
                stderr=result.stderr,
            )

        logger.info("Docker command completed", command=safe_command, execution_time=result.execution_time)
        return result

    async def probe(self, command: str = "docker version") -> bool:
        """Run a command and report only whether it succeeded"""
        try:
            await self.run(command)
            return True
        except CommandExecutionError:
            return False
