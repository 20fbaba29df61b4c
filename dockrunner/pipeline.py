"""Pipeline resource definitions and their construction from YAML data."""

import re
from dataclasses import dataclass, field, fields

KIND = "pipeline"
TYPE = "docker"

_TRUE = frozenset("y Y yes Yes YES on On ON true True TRUE".split())
_FALSE = frozenset("n N no No NO off Off OFF false False FALSE".split())
_OCTAL_RE = re.compile(r"[+-]?0[0-7]+")
_SIZE_RE = re.compile(r"(\d+(?:\.\d+)*) ?([kKmMgGtTpP])?[iI]?[bB]?")
_SIZE_UNITS = {"k": 1024, "m": 1024**2, "g": 1024**3, "t": 1024**4, "p": 1024**5}


def _mapping(value, key):
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key}: expected a mapping, got {value!r}")
    return value


def _entry(value, key):
    if value is None:
        raise ValueError(f"{key}: null entry")
    return _mapping(value, key)


def _list(value, key):
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected a list, got {value!r}")
    return value


def _str(value, key):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"{key}: expected a string, got {value!r}")


def _bool(value, key):
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
    raise ValueError(f"{key}: cannot use {value!r} as a boolean")


def _parse_int(text):
    digits = text.replace("_", "")
    try:
        return int(digits, 0)
    except ValueError:
        if _OCTAL_RE.fullmatch(digits):
            return int(digits, 8)
        raise


def _int(value, key):
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return _parse_int(value)
        except ValueError:
            pass
    raise ValueError(f"{key}: cannot use {value!r} as an integer")


def _str_list(value, key):
    return [_str(item, key) for item in _list(value, key)]


def _str_map(value, key):
    return {_str(k, key): _str(v, key) for k, v in _mapping(value, key).items()}


def _raw_map(value, key):
    return {_str(k, key): v for k, v in _mapping(value, key).items()}


def parse_bytes_size(value):
    """Return a size in bytes from an integer or a text such as "1GiB".

    Units are binary multiples (k, m, g, t, p) and are case-insensitive.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"invalid size: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid size: {value!r}")
    try:
        return _parse_int(value)
    except ValueError:
        pass
    found = _SIZE_RE.fullmatch(value)
    if found is None:
        raise ValueError(f"invalid size: '{value}'")
    try:
        size = float(found.group(1))
    except ValueError:
        raise ValueError(f"invalid size: '{value}'") from None
    unit = found.group(2)
    if unit:
        size *= _SIZE_UNITS[unit.lower()]
    return int(size)


@dataclass
class Platform:
    """The target platform of a pipeline."""

    os: str = ""
    arch: str = ""
    variant: str = ""
    version: str = ""


@dataclass
class Clone:
    """Settings of the automatic clone step."""

    disable: bool = False
    depth: int = 0
    retries: int = 0
    trace: bool = False
    skip_verify: bool = False


@dataclass
class Concurrency:
    """Limits on concurrently running pipelines."""

    limit: int = 0


@dataclass
class Condition:
    """Include and exclude patterns for a single trigger attribute."""

    include: list = field(default_factory=list)
    exclude: list = field(default_factory=list)


@dataclass
class Conditions:
    """The conditions under which a pipeline or step runs."""

    action: Condition = field(default_factory=Condition)
    cron: Condition = field(default_factory=Condition)
    ref: Condition = field(default_factory=Condition)
    repo: Condition = field(default_factory=Condition)
    instance: Condition = field(default_factory=Condition)
    target: Condition = field(default_factory=Condition)
    event: Condition = field(default_factory=Condition)
    branch: Condition = field(default_factory=Condition)
    status: Condition = field(default_factory=Condition)
    paths: Condition = field(default_factory=Condition)


@dataclass
class Workspace:
    """The pipeline workspace location."""

    base: str = ""
    path: str = ""


@dataclass
class VolumeDevice:
    """A raw block device mapped into a container."""

    name: str = ""
    device_path: str = ""


@dataclass
class VolumeMount:
    """A volume mounted at a path within a container."""

    name: str = ""
    path: str = ""


@dataclass
class VolumeEmptyDir:
    """A temporary directory shared between containers."""

    medium: str = ""
    size_limit: int = 0


@dataclass
class VolumeHostPath:
    """A file or directory of the host mounted into containers."""

    path: str = ""


def _condition(value, key):
    if value is None:
        return Condition()
    if isinstance(value, list):
        return Condition(include=_str_list(value, key))
    if isinstance(value, dict):
        return Condition(
            include=_str_list(value.get("include"), key),
            exclude=_str_list(value.get("exclude"), key),
        )
    return Condition(include=[_str(value, key)])


def _conditions(value, key):
    data = _mapping(value, key)
    return Conditions(
        **{item.name: _condition(data.get(item.name), item.name) for item in fields(Conditions)}
    )


def _platform(value):
    data = _mapping(value, "platform")
    return Platform(
        os=_str(data.get("os"), "os"),
        arch=_str(data.get("arch"), "arch"),
        variant=_str(data.get("variant"), "variant"),
        version=_str(data.get("version"), "version"),
    )


def _clone(value):
    data = _mapping(value, "clone")
    return Clone(
        disable=_bool(data.get("disable"), "disable"),
        depth=_int(data.get("depth"), "depth"),
        retries=_int(data.get("retries"), "retries"),
        trace=_bool(data.get("trace"), "trace"),
        skip_verify=_bool(data.get("skip_verify"), "skip_verify"),
    )


def _concurrency(value):
    data = _mapping(value, "concurrency")
    return Concurrency(limit=_int(data.get("limit"), "limit"))


def _workspace(value):
    data = _mapping(value, "workspace")
    return Workspace(base=_str(data.get("base"), "base"), path=_str(data.get("path"), "path"))


def _volume_device(value):
    data = _entry(value, "devices")
    return VolumeDevice(
        name=_str(data.get("name"), "name"),
        device_path=_str(data.get("path"), "path"),
    )


def _volume_mount(value):
    data = _entry(value, "volumes")
    return VolumeMount(name=_str(data.get("name"), "name"), path=_str(data.get("path"), "path"))


@dataclass
class Volume:
    """A volume that containers of the pipeline can mount."""

    name: str = ""
    empty_dir: VolumeEmptyDir | None = None
    host_path: VolumeHostPath | None = None

    @classmethod
    def from_dict(cls, data):
        """Build a volume from its YAML mapping."""
        data = _entry(data, "volumes")
        temp = data.get("temp")
        host = data.get("host")
        empty_dir = None
        if temp is not None:
            temp = _mapping(temp, "temp")
            empty_dir = VolumeEmptyDir(
                medium=_str(temp.get("medium"), "medium"),
                size_limit=parse_bytes_size(temp.get("size_limit")),
            )
        host_path = None
        if host is not None:
            host = _mapping(host, "host")
            host_path = VolumeHostPath(path=_str(host.get("path"), "path"))
        return cls(name=_str(data.get("name"), "name"), empty_dir=empty_dir, host_path=host_path)


@dataclass
class Step:
    """A pipeline step or service."""

    name: str = ""
    image: str = ""
    command: list = field(default_factory=list)
    commands: list = field(default_factory=list)
    detach: bool = False
    depends_on: list = field(default_factory=list)
    devices: list = field(default_factory=list)
    dns: list = field(default_factory=list)
    dns_search: list = field(default_factory=list)
    entrypoint: list = field(default_factory=list)
    environment: dict = field(default_factory=dict)
    extra_hosts: list = field(default_factory=list)
    failure: str = ""
    mem_limit: int = 0
    memswap_limit: int = 0
    network: str = ""
    privileged: bool = False
    pull: str = ""
    settings: dict = field(default_factory=dict)
    shell: str = ""
    shm_size: int = 0
    user: str = ""
    volumes: list = field(default_factory=list)
    when: Conditions = field(default_factory=Conditions)
    working_dir: str = ""

    @classmethod
    def from_dict(cls, data):
        """Build a step from its YAML mapping."""
        data = _mapping(data, "step")
        return cls(
            name=_str(data.get("name"), "name"),
            image=_str(data.get("image"), "image"),
            command=_str_list(data.get("command"), "command"),
            commands=_str_list(data.get("commands"), "commands"),
            detach=_bool(data.get("detach"), "detach"),
            depends_on=_str_list(data.get("depends_on"), "depends_on"),
            devices=[_volume_device(item) for item in _list(data.get("devices"), "devices")],
            dns=_str_list(data.get("dns"), "dns"),
            dns_search=_str_list(data.get("dns_search"), "dns_search"),
            entrypoint=_str_list(data.get("entrypoint"), "entrypoint"),
            environment=_raw_map(data.get("environment"), "environment"),
            extra_hosts=_str_list(data.get("extra_hosts"), "extra_hosts"),
            failure=_str(data.get("failure"), "failure"),
            mem_limit=parse_bytes_size(data.get("mem_limit")),
            memswap_limit=parse_bytes_size(data.get("memswap_limit")),
            network=_str(data.get("network_mode"), "network_mode"),
            privileged=_bool(data.get("privileged"), "privileged"),
            pull=_str(data.get("pull"), "pull"),
            settings=_raw_map(data.get("settings"), "settings"),
            shell=_str(data.get("shell"), "shell"),
            shm_size=parse_bytes_size(data.get("shm_size")),
            user=_str(data.get("user"), "user"),
            volumes=[_volume_mount(item) for item in _list(data.get("volumes"), "volumes")],
            when=_conditions(data.get("when"), "when"),
            working_dir=_str(data.get("working_dir"), "working_dir"),
        )


def _steps(value, key):
    return [None if item is None else Step.from_dict(item) for item in _list(value, key)]


@dataclass
class Pipeline:
    """A pipeline resource whose steps run in containers."""

    version: str = ""
    kind: str = ""
    type: str = ""
    name: str = ""
    deps: list = field(default_factory=list)
    clone: Clone = field(default_factory=Clone)
    concurrency: Concurrency = field(default_factory=Concurrency)
    node: dict = field(default_factory=dict)
    platform: Platform = field(default_factory=Platform)
    trigger: Conditions = field(default_factory=Conditions)
    environment: dict = field(default_factory=dict)
    services: list = field(default_factory=list)
    steps: list = field(default_factory=list)
    volumes: list = field(default_factory=list)
    pull_secrets: list = field(default_factory=list)
    workspace: Workspace = field(default_factory=Workspace)

    def get_step(self, name):
        """Return the step with the given name, or None."""
        return next((step for step in self.steps if step is not None and step.name == name), None)

    @classmethod
    def from_dict(cls, data):
        """Build a pipeline from its YAML mapping."""
        data = _mapping(data, "pipeline")
        return cls(
            version=_str(data.get("version"), "version"),
            kind=_str(data.get("kind"), "kind"),
            type=_str(data.get("type"), "type"),
            name=_str(data.get("name"), "name"),
            deps=_str_list(data.get("depends_on"), "depends_on"),
            clone=_clone(data.get("clone")),
            concurrency=_concurrency(data.get("concurrency")),
            node=_str_map(data.get("node"), "node"),
            platform=_platform(data.get("platform")),
            trigger=_conditions(data.get("trigger"), "trigger"),
            environment=_str_map(data.get("environment"), "environment"),
            services=_steps(data.get("services"), "services"),
            steps=_steps(data.get("steps"), "steps"),
            volumes=[Volume.from_dict(item) for item in _list(data.get("volumes"), "volumes")],
            pull_secrets=_str_list(data.get("image_pull_secrets"), "image_pull_secrets"),
            workspace=_workspace(data.get("workspace")),
        )