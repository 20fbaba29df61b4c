"""The runtime specification of a pipeline executed in containers."""

from dataclasses import dataclass, field, replace


@dataclass
class Platform:
    """The target platform."""

    os: str = ""
    arch: str = ""
    variant: str = ""
    version: str = ""


@dataclass
class Auth:
    """Registry authentication credentials."""

    address: str = ""
    username: str = ""
    password: str = ""


@dataclass
class Secret:
    """A secret exposed to a step as an environment variable."""

    name: str = ""
    env: str = ""
    data: bytes = b""
    mask: bool = False

    def value(self):
        """Return the secret data as text."""
        return bytes(self.data).decode("utf-8", errors="replace")


@dataclass
class VolumeMount:
    """A volume mounted at a path within a container."""

    name: str = ""
    path: str = ""


@dataclass
class VolumeDevice:
    """A raw block device mapped into a container."""

    name: str = ""
    device_path: str = ""


@dataclass
class VolumeEmptyDir:
    """A temporary directory shared between containers."""

    id: str = ""
    name: str = ""
    medium: str = ""
    size_limit: int = 0
    labels: dict = field(default_factory=dict)


@dataclass
class VolumeHostPath:
    """A file or directory of the host mounted into containers."""

    id: str = ""
    name: str = ""
    path: str = ""
    labels: dict = field(default_factory=dict)
    read_only: bool = False


@dataclass
class Volume:
    """A volume that containers can mount."""

    empty_dir: VolumeEmptyDir | None = None
    host_path: VolumeHostPath | None = None


@dataclass
class Network:
    """The network created for the pipeline and attached to containers."""

    enable_ipv6: bool = False
    id: str = ""
    labels: dict = field(default_factory=dict)
    options: dict = field(default_factory=dict)


@dataclass
class Step:
    """A single container step of the pipeline."""

    id: str = ""
    auth: Auth | None = None
    command: list = field(default_factory=list)
    cpu_period: int = 0
    cpu_quota: int = 0
    cpu_shares: int = 0
    cpu_set: list = field(default_factory=list)
    detach: bool = False
    depends_on: list = field(default_factory=list)
    devices: list = field(default_factory=list)
    dns: list = field(default_factory=list)
    dns_search: list = field(default_factory=list)
    entrypoint: list = field(default_factory=list)
    envs: dict = field(default_factory=dict)
    err_policy: int = 0
    extra_hosts: list = field(default_factory=list)
    ignore_stdout: bool = False
    ignore_stderr: bool = False
    image: str = ""
    labels: dict = field(default_factory=dict)
    memswap_limit: int = 0
    mem_limit: int = 0
    name: str = ""
    network: str = ""
    networks: list = field(default_factory=list)
    privileged: bool = False
    pull: str = ""
    run_policy: int = 0
    secrets: list = field(default_factory=list)
    shm_size: int = 0
    user: str = ""
    volumes: list = field(default_factory=list)
    working_dir: str = ""

    def clone(self):
        """Return a shallow copy of the step with its own environment."""
        return replace(self, envs=dict(self.envs or {}))


@dataclass
class Spec:
    """The instructions for reproducible pipeline execution."""

    platform: Platform = field(default_factory=Platform)
    steps: list = field(default_factory=list)
    internal: list = field(default_factory=list)
    volumes: list = field(default_factory=list)
    network: Network = field(default_factory=Network)