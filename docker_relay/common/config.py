# docker_relay/common/config.py
"""
Docker Relay configuration - pydantic-settings
"""
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict

DEFAULT_BACKUP_DIR = "/tmp/docker-backups"
DEFAULT_PROJECT_LABEL_KEY = "mcp-server-docker.project"


class ExecutorConfig(BaseSettings):
    """External process execution"""

    timeout: Optional[float] = Field(default=None, description="Seconds before a docker call is killed; unset means no limit")
    shell: str = Field(default="/bin/sh")
    docker_host: Optional[str] = Field(default=None, description="Initial docker host override")

    model_config = ConfigDict(env_prefix="DOCKER_RELAY_EXECUTOR_", case_sensitive=False)


class BackupConfig(BaseSettings):
    """Backup and export defaults"""

    default_path: Path = Field(default=Path(DEFAULT_BACKUP_DIR))
    retention_days: int = Field(default=7, ge=0)
    list_limit: int = Field(default=20, ge=1)
    helper_image: str = Field(default="alpine")

    model_config = ConfigDict(env_prefix="DOCKER_RELAY_BACKUP_", case_sensitive=False)


class RelayConfig(BaseSettings):
    """Main configuration with sub-configs"""

    server_name: str = Field(default="docker-mcp-server")
    version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    project_label_key: str = Field(default=DEFAULT_PROJECT_LABEL_KEY)

    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)

    model_config = ConfigDict(env_prefix="DOCKER_RELAY_", case_sensitive=False)


def get_config() -> RelayConfig:
    """Load the complete configuration"""
    return RelayConfig()


def get_executor_config() -> ExecutorConfig:
    """Load only the executor configuration"""
    return ExecutorConfig()


def get_backup_config() -> BackupConfig:
    """Load only the backup configuration"""
    return BackupConfig()
