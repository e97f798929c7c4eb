# docker_relay/modules/backup.py
"""
Backup and migration

Containers are exported with ``docker export``, their configuration saved
from ``docker inspect`` and each named volume archived through a throw-away
helper container. Projects are exported container by container.
"""
import json
import time
from itertools import islice
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

import aiofiles
import structlog

from ..cli.utils.decorators import tool_errors
from ..common.config import BackupConfig, get_backup_config
from ..common.exceptions import BackupError, CommandExecutionError, ValidationError
from ..core.command_executor import DockerCommandExecutor
from ..core.structured_output import ToolResponse
from .projects import ProjectManager

logger = structlog.get_logger()

BACKUP_ACTIONS = ("backup_container", "export_project", "list_backups", "cleanup_backups")


class DockerBackup:
    """Container and project backups on the local filesystem"""

    def __init__(
        self,
        executor: DockerCommandExecutor,
        projects: ProjectManager,
        config: Optional[BackupConfig] = None,
    ):
        self.executor = executor
        self.projects = projects
        self.config = config or get_backup_config()

    def resolve_path(self, backup_path: Optional[Union[str, Path]] = None) -> Path:
        return Path(backup_path) if backup_path else Path(self.config.default_path)

    async def backup_container(self, container_name: str, backup_path: Path) -> List[str]:
        """Export one container, its configuration and its named volumes"""
        results: List[str] = []
        try:
            backup_path.mkdir(parents=True, exist_ok=True)

            archive = backup_path / f"{container_name}-backup.tar"
            await self.executor.run(f"docker export -o {archive} {container_name}")
            results.append(f"✅ Exported container {container_name} to {archive}")

            inspect = await self.executor.run(f"docker inspect {container_name}")
            config_file = backup_path / f"{container_name}-config.json"
            async with aiofiles.open(config_file, "w", encoding="utf-8") as f:
                await f.write(inspect.stdout)
            results.append(f"✅ Saved container configuration to {config_file}")

            mounts = json.loads(inspect.stdout)[0].get("Mounts") or []
            for mount in mounts:
                if mount.get("Type") != "volume":
                    continue
                volume = mount["Name"]
                await self.executor.run(
                    f"docker run --rm -v {volume}:/volume -v {backup_path.resolve()}:/backup "
                    f"{self.config.helper_image} tar czf /backup/{volume}-volume.tar -C /volume ."
                )
                results.append(f"✅ Backed up volume {volume} to {backup_path / f'{volume}-volume.tar'}")
        except (CommandExecutionError, OSError, json.JSONDecodeError, IndexError, KeyError) as e:
            logger.error("Container backup failed", container=container_name, path=str(backup_path), error=str(e))
            raise BackupError(f"Backup failed: {e}") from e

        logger.info("Container backed up", container=container_name, path=str(backup_path))
        return results

    async def export_project(self, project_name: str, export_path: Path) -> str:
        resources = await self.projects.get_project_resources(project_name)
        target = export_path / project_name
        results: List[str] = []

        try:
            target.mkdir(parents=True, exist_ok=True)

            for container_name in resources.container_names():
                await self.backup_container(container_name, target)
                results.append(f"✅ Exported container {container_name}")

            metadata = {
                "projectName": project_name,
                "exportDate": datetime.now(timezone.utc).isoformat(),
                "resources": {
                    "containers": len(resources.containers),
                    "networks": len(resources.networks),
                    "volumes": len(resources.volumes),
                },
            }
            async with aiofiles.open(target / "project-metadata.json", "w", encoding="utf-8") as f:
                await f.write(json.dumps(metadata, indent=2))
            results.append("✅ Exported project metadata")
        except (BackupError, OSError) as e:
            logger.error("Project export failed", project=project_name, error=str(e))
            raise BackupError(f"Export failed: {e}") from e

        return (
            "## Project Export Complete\n\n"
            + "\n".join(results)
            + f"\n\nProject {project_name} has been exported to {target}"
        )

    def list_backups(self, backup_path: Path) -> List[Path]:
        """First backup archives and configuration files under the path"""
        if not backup_path.is_dir():
            return []
        found = (
            p for p in sorted(backup_path.rglob("*"))
            if p.is_file() and (p.suffix == ".tar" or p.name.endswith("-config.json"))
        )
        return list(islice(found, self.config.list_limit))

    def cleanup_backups(self, backup_path: Path, days: int) -> int:
        """Delete files older than the given number of days; return how many"""
        if not backup_path.is_dir():
            return 0
        cutoff = time.time() - days * 86400
        removed = 0
        for path in backup_path.rglob("*"):
            if path.is_file() and path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        logger.info("Backups cleaned up", path=str(backup_path), days=days, removed=removed)
        return removed

    @tool_errors("Error with backup/migration")
    async def docker_backup_migration(
        self,
        action: str,
        container_name: Optional[str] = None,
        project_name: Optional[str] = None,
        backup_path: Optional[str] = None,
        days: Optional[int] = None,
    ) -> ToolResponse:
        path = self.resolve_path(backup_path)

        if action == "backup_container":
            if not container_name:
                raise ValidationError("Container name is required for backup", field="container_name")
            results = await self.backup_container(container_name, path)
            return ToolResponse.ok("## Container Backup Complete\n\n" + "\n".join(results))

        if action == "export_project":
            if not project_name:
                raise ValidationError("Project name is required for export", field="project_name")
            return ToolResponse.ok(await self.export_project(project_name, path))

        if action == "list_backups":
            listing = "\n".join(str(p) for p in self.list_backups(path))
            return ToolResponse.ok(f"## Available Backups\n\n```\n{listing or 'No backups found'}\n```")

        if action == "cleanup_backups":
            keep_days = days if days is not None else self.config.retention_days
            removed = self.cleanup_backups(path, keep_days)
            return ToolResponse.ok(
                f"✅ Cleaned up backups older than {keep_days} days from {path} ({removed} files removed)"
            )

        raise ValidationError(f"Unknown action '{action}'. Expected one of: {', '.join(BACKUP_ACTIONS)}", field="action")
