"""Conversion of pipeline steps into Docker Engine API configurations."""

from enum import Enum


class MountType(str, Enum):
    """The kind of a container mount."""

    BIND = "bind"
    VOLUME = "volume"
    TMPFS = "tmpfs"
    NAMED_PIPE = "npipe"


_PIPE_PREFIX = "\\\\.\\pipe\\"


def to_config(spec, step):
    """Return the container configuration for a step."""
    config = {
        "Image": step.image,
        "Labels": step.labels,
        "WorkingDir": step.working_dir,
        "User": step.user,
        "AttachStdin": False,
        "AttachStdout": True,
        "AttachStderr": True,
        "Tty": False,
        "OpenStdin": False,
        "StdinOnce": False,
        "ArgsEscaped": False,
    }
    env = to_env(step.envs) if step.envs else []
    env.extend(f"{secret.env}={secret.value()}" for secret in step.secrets)
    if env:
        config["Env"] = env
    if step.entrypoint:
        config["Entrypoint"] = step.entrypoint
    if step.command:
        config["Cmd"] = step.command
    if step.volumes:
        config["Volumes"] = to_volume_set(spec, step)
    return config


def to_host_config(spec, step):
    """Return the container host configuration for a step."""
    config = {
        "LogConfig": {"Type": "json-file"},
        # windows does not support privileged mode
        "Privileged": step.privileged and spec.platform.os != "windows",
        "ShmSize": step.shm_size,
    }
    if step.network:
        config["NetworkMode"] = step.network
    if step.dns:
        config["Dns"] = step.dns
    if step.dns_search:
        config["DnsSearch"] = step.dns_search
    if step.extra_hosts:
        config["ExtraHosts"] = step.extra_hosts
    if not is_unlimited(step):
        config.update(
            CpuPeriod=step.cpu_period,
            CpuQuota=step.cpu_quota,
            CpusetCpus=",".join(step.cpu_set),
            CpuShares=step.cpu_shares,
            Memory=step.mem_limit,
            MemorySwap=step.memswap_limit,
        )
    if step.volumes:
        for key, values in (
            ("Devices", to_devices(spec, step)),
            ("Binds", to_volume_binds(spec, step)),
            ("Mounts", to_volume_mounts(spec, step)),
        ):
            if values:
                config[key] = values
    return config


def to_net_config(spec, step):
    """Return the networking configuration for a step."""
    # a step that overrides the network is not attached to the pipeline network
    if step.network:
        return {}
    network_id = spec.network.id
    return {
        "EndpointsConfig": {
            network_id: {"NetworkID": network_id, "Aliases": [step.name]},
        }
    }


def to_devices(spec, step):
    """Return the device mappings of a step."""
    mappings = []
    for mount in step.devices:
        device = lookup_volume(spec, mount.name)
        if device is None or not is_device(device):
            continue
        mappings.append(
            {
                "PathOnHost": device.host_path.path,
                "PathInContainer": mount.device_path,
                "CgroupPermissions": "rwm",
            }
        )
    return mappings


def to_volume_set(spec, step):
    """Return the set of container paths of bind-mounted volumes."""
    paths = {}
    for mount in step.volumes:
        volume = lookup_volume(spec, mount.name)
        if volume is None or is_device(volume) or is_named_pipe(volume):
            continue
        if is_bind_mount(volume):
            paths[mount.path] = {}
    return paths


def to_volume_binds(spec, step):
    """Return the "source:target" binds of data volumes and bind mounts."""
    binds = []
    for mount in step.volumes:
        volume = lookup_volume(spec, mount.name)
        if volume is None or is_device(volume):
            continue
        if is_data_volume(volume):
            binds.append(f"{volume.empty_dir.id}:{mount.path}")
        if is_bind_mount(volume):
            binds.append(f"{volume.host_path.path}:{mount.path}")
    return binds


def to_volume_mounts(spec, step):
    """Return the mounts that cannot be expressed as binds."""
    mounts = []
    for target in step.volumes:
        source = lookup_volume(spec, target.name)
        if source is None:
            continue
        if is_bind_mount(source) and not is_device(source):
            continue
        # data volumes are attached through binds instead
        if is_data_volume(source):
            continue
        mounts.append(to_mount(source, target))
    return mounts


def to_mount(source, target):
    """Return the mount structure for a volume mounted at a target."""
    mount = {"Target": target.path, "Type": to_volume_type(source).value}
    if is_bind_mount(source) or is_named_pipe(source):
        mount["Source"] = source.host_path.path
        mount["ReadOnly"] = source.host_path.read_only
    if is_tmpfs(source):
        mount["TmpfsOptions"] = {"SizeBytes": source.empty_dir.size_limit, "Mode": 0o700}
    return mount


def to_volume_type(volume):
    """Return the mount type of a volume."""
    if is_data_volume(volume):
        return MountType.VOLUME
    if is_tmpfs(volume):
        return MountType.TMPFS
    if is_named_pipe(volume):
        return MountType.NAMED_PIPE
    return MountType.BIND


def to_env(env):
    """Return KEY=value entries for the non-empty variables of env."""
    return [f"{key}={value}" for key, value in env.items() if value != ""]


def is_unlimited(step):
    """Return True if the step has no resource limits."""
    return not (
        step.cpu_set
        or step.cpu_period
        or step.cpu_quota
        or step.cpu_shares
        or step.mem_limit
        or step.memswap_limit
    )


def is_bind_mount(volume):
    """Return True if the volume is a host path."""
    return volume.host_path is not None


def is_tmpfs(volume):
    """Return True if the volume is held in memory."""
    return volume.empty_dir is not None and volume.empty_dir.medium == "memory"


def is_data_volume(volume):
    """Return True if the volume is a data volume."""
    return volume.empty_dir is not None and volume.empty_dir.medium != "memory"


def is_device(volume):
    """Return True if the volume is a host device."""
    return volume.host_path is not None and volume.host_path.path.startswith("/dev/")


def is_named_pipe(volume):
    """Return True if the volume is a named pipe."""
    return volume.host_path is not None and volume.host_path.path.startswith(_PIPE_PREFIX)


def lookup_volume(spec, name):
    """Return the volume with the given name, or None."""
    for volume in spec.volumes:
        if volume.host_path is not None and volume.host_path.name == name:
            return volume
        if volume.empty_dir is not None and volume.empty_dir.name == name:
            return volume
    return None