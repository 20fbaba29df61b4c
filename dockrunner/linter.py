"""Security and consistency rules for docker pipelines."""

import posixpath

_RESERVED_VOLUMES = frozenset({"workspace", "_workspace", "_docker_socket"})


class LintError(ValueError):
    """The pipeline breaks a linting rule."""


class DuplicateStepNameError(LintError):
    """Two steps of the pipeline share a name."""

    def __init__(self, message="linter: duplicate step names"):
        super().__init__(message)


def _clean(path):
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _untrusted_rules(step):
    yield step.privileged, "enable privileged mode"
    yield bool(step.devices), "mount devices"
    yield bool(step.dns), "configure dns"
    yield bool(step.dns_search), "configure dns_search"
    yield bool(step.extra_hosts), "configure extra_hosts"
    yield bool(step.network), "configure network_mode"
    yield step.shm_size > 0, "configure shm_size"


def _check_step(step, trusted):
    if not step.image:
        raise LintError("linter: invalid or missing image")
    if not trusted:
        for broken, action in _untrusted_rules(step):
            if broken:
                raise LintError(f"linter: untrusted repositories cannot {action}")
    for mount in step.volumes:
        if mount.name in _RESERVED_VOLUMES:
            raise LintError(f"linter: invalid volume name: {mount.name}")
        if _clean(mount.path).startswith("/run/drone"):
            raise LintError("linter: cannot mount volume at /run/drone")


def _check_deps(step, names):
    for dep in step.depends_on:
        if dep not in names:
            raise LintError(
                f"linter: unknown step dependency detected: {step.name} references {dep}"
            )
        if step.name == dep:
            raise LintError(f"linter: cyclical step dependency detected: {dep}")


def _check_steps(pipeline, trusted):
    names = set() if pipeline.clone.disable else {"clone"}
    for step in [*pipeline.services, *pipeline.steps]:
        if step is None:
            raise LintError("linter: nil step")
        if step.name in names:
            raise DuplicateStepNameError()
        names.add(step.name)
        _check_step(step, trusted)
        _check_deps(step, names)


def _check_volumes(pipeline, trusted):
    for volume in pipeline.volumes:
        if volume.empty_dir is not None and not trusted and volume.empty_dir.medium == "memory":
            raise LintError("linter: untrusted repositories cannot mount in-memory volumes")
        if volume.host_path is not None and not trusted:
            raise LintError("linter: untrusted repositories cannot mount host volumes")
        if not volume.name:
            raise LintError("linter: missing volume name")
        if volume.name in _RESERVED_VOLUMES:
            raise LintError(f"linter: invalid volume name: {volume.name}")


class Linter:
    """Evaluates a pipeline against the linting rules."""

    def lint(self, pipeline, trusted):
        """Raise LintError if the pipeline breaks a rule."""
        _check_steps(pipeline, trusted)
        _check_volumes(pipeline, trusted)