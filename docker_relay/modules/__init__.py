"""
docker-relay modules
Tool handlers grouped by concern
"""

from .tools import DockerTools
from .projects import ProjectLabeler, ProjectManager
from .remote import RemoteDockerManager
from .monitoring import DockerMonitor
from .backup import DockerBackup
from .help import HELP_TEXT, HELP_URI

__all__ = [
    "DockerTools",
    "ProjectLabeler",
    "ProjectManager",
    "RemoteDockerManager",
    "DockerMonitor",
    "DockerBackup",
    "HELP_TEXT",
    "HELP_URI",
]
