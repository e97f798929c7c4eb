# docker_relay/core/structured_output.py
"""
Pydantic schemas for tool inputs and outputs - docker-relay
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ToolResponse(BaseModel):
    """Text relayed back to the caller of a tool"""

    text: str = Field(description="Human-readable output")
    is_error: bool = Field(default=False, description="Whether the operation failed")

    @classmethod
    def ok(cls, text: str) -> "ToolResponse":
        return cls(text=text)

    @classmethod
    def error(cls, text: str) -> "ToolResponse":
        return cls(text=text, is_error=True)


class HealthCheck(BaseModel):
    """Container health check options"""

    test: str = Field(description="Health check command")
    interval: Optional[str] = Field(default=None, description="Interval between checks, e.g. 30s")
    timeout: Optional[str] = Field(default=None, description="Check timeout, e.g. 5s")
    retries: Optional[int] = Field(default=None, description="Consecutive failures before unhealthy")


class ResourceLimits(BaseModel):
    """Container resource constraints"""

    memory: Optional[str] = Field(default=None, description="Memory limit, e.g. 512m")
    cpus: Optional[str] = Field(default=None, description="CPU quota, e.g. 0.5")
    memory_swap: Optional[str] = Field(default=None, description="Memory plus swap limit")


class SecurityOptions(BaseModel):
    """Container security options"""

    user: Optional[str] = Field(default=None, description="User or uid:gid to run as")
    read_only: bool = Field(default=False, description="Mount the root filesystem read-only")
    tmpfs: List[str] = Field(default_factory=list, description="tmpfs mounts")


class ContainerSpec(BaseModel):
    """Everything create_container can put on a docker run line"""

    image: str = Field(description="Docker image to run")
    name: Optional[str] = None
    ports: List[str] = Field(default_factory=list)
    volumes: List[str] = Field(default_factory=list)
    environment: Dict[str, str] = Field(default_factory=dict)
    network: Optional[str] = None
    detached: bool = True
    interactive: bool = False
    command: Optional[str] = None
    workdir: Optional[str] = None
    restart: Optional[str] = None
    health_check: Optional[HealthCheck] = None
    resources: Optional[ResourceLimits] = None
    security: Optional[SecurityOptions] = None
    labels: Dict[str, str] = Field(default_factory=dict)
    hostname: Optional[str] = None
    domainname: Optional[str] = None
    project_name: Optional[str] = None

    def to_run_command(self) -> str:
        """Assemble the docker run line, image and command last"""
        parts = ["docker run"]

        if self.detached and not self.interactive:
            parts.append("-d")
        if self.interactive:
            parts.append("-it")
        if self.name:
            parts.append(f"--name {self.name}")

        parts.extend(f"-p {port}" for port in self.ports)
        parts.extend(f"-v {volume}" for volume in self.volumes)
        parts.extend(f"-e {key}={value}" for key, value in self.environment.items())

        if self.network:
            parts.append(f"--network {self.network}")
        if self.workdir:
            parts.append(f"-w {self.workdir}")
        if self.restart:
            parts.append(f"--restart {self.restart}")
        if self.hostname:
            parts.append(f"--hostname {self.hostname}")
        if self.domainname:
            parts.append(f"--domainname {self.domainname}")

        if self.health_check:
            hc = self.health_check
            parts.append(f'--health-cmd "{hc.test}"')
            if hc.interval:
                parts.append(f"--health-interval {hc.interval}")
            if hc.timeout:
                parts.append(f"--health-timeout {hc.timeout}")
            if hc.retries:
                parts.append(f"--health-retries {hc.retries}")

        if self.resources:
            if self.resources.memory:
                parts.append(f"--memory {self.resources.memory}")
            if self.resources.cpus:
                parts.append(f"--cpus {self.resources.cpus}")
            if self.resources.memory_swap:
                parts.append(f"--memory-swap {self.resources.memory_swap}")

        if self.security:
            if self.security.user:
                parts.append(f"--user {self.security.user}")
            if self.security.read_only:
                parts.append("--read-only")
            parts.extend(f"--tmpfs {mount}" for mount in self.security.tmpfs)

        parts.extend(f'--label "{key}={value}"' for key, value in self.labels.items())

        parts.append(self.image)
        if self.command:
            parts.append(self.command)
        return " ".join(parts)


class ServiceConfig(BaseModel):
    """Desired state of one service in a project"""

    image: str
    ports: List[str] = Field(default_factory=list)
    environment: Dict[str, str] = Field(default_factory=dict)
    volumes: List[str] = Field(default_factory=list)
    depends_on: List[str] = Field(default_factory=list)


class ComposeProject(BaseModel):
    """Declarative description of a project used during plan/apply"""

    name: str
    services: Dict[str, ServiceConfig] = Field(default_factory=dict)
    networks: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    volumes: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @property
    def needs_network(self) -> bool:
        return len(self.services) > 1

    @property
    def network_name(self) -> str:
        return f"{self.name}-network"

    def container_name(self, service: str) -> str:
        return f"{self.name}-{service}"

    def volume_name(self, volume: str) -> str:
        return f"{self.name}-{volume}"


class ProjectResources(BaseModel):
    """Labelled docker resources that currently exist for a project"""

    name: str
    containers: List[Dict[str, Any]] = Field(default_factory=list)
    networks: List[Dict[str, Any]] = Field(default_factory=list)
    volumes: List[Dict[str, Any]] = Field(default_factory=list)

    def container_names(self) -> List[str]:
        return [c.get("Names") or c.get("name", "") for c in self.containers]

    def network_names(self) -> List[str]:
        return [n.get("Name") or n.get("name", "") for n in self.networks]

    def volume_names(self) -> List[str]:
        return [v.get("Name") or v.get("name", "") for v in self.volumes]
