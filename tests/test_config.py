"""
Tests for pydantic-settings configuration
"""
import os
from pathlib import Path
from unittest.mock import patch

from docker_relay.common.config import (
    DEFAULT_PROJECT_LABEL_KEY,
    BackupConfig,
    ExecutorConfig,
    RelayConfig,
    get_config,
)


def test_defaults():
    with patch.dict(os.environ, {}, clear=True):
        config = get_config()

    assert config.server_name == "docker-mcp-server"
    assert config.version == "1.0.0"
    assert config.project_label_key == DEFAULT_PROJECT_LABEL_KEY
    assert config.executor.timeout is None
    assert config.backup.default_path == Path("/tmp/docker-backups")
    assert config.backup.retention_days == 7


def test_environment_overrides():
    env = {
        "DOCKER_RELAY_LOG_LEVEL": "DEBUG",
        "DOCKER_RELAY_EXECUTOR_TIMEOUT": "12.5",
        "DOCKER_RELAY_EXECUTOR_DOCKER_HOST": "tcp://remote:2376",
        "DOCKER_RELAY_BACKUP_DEFAULT_PATH": "/var/backups/docker",
        "DOCKER_RELAY_BACKUP_RETENTION_DAYS": "30",
    }
    with patch.dict(os.environ, env, clear=True):
        config = RelayConfig()

    assert config.log_level == "DEBUG"
    assert config.executor.timeout == 12.5
    assert config.executor.docker_host == "tcp://remote:2376"
    assert config.backup.default_path == Path("/var/backups/docker")
    assert config.backup.retention_days == 30


def test_sub_configs_load_independently():
    with patch.dict(os.environ, {"DOCKER_RELAY_EXECUTOR_SHELL": "/bin/bash"}, clear=True):
        assert ExecutorConfig().shell == "/bin/bash"
        assert BackupConfig().helper_image == "alpine"
