import pytest

from dockrunner.pipeline import (
    Clone,
    Condition,
    Conditions,
    Pipeline,
    Platform,
    Step,
    Volume,
    VolumeDevice,
    VolumeEmptyDir,
    VolumeHostPath,
    VolumeMount,
    parse_bytes_size,
)


def test_get_step():
    build = Step(name="build")
    test = Step(name="test")
    pipeline = Pipeline(steps=[build, test])
    assert pipeline.get_step("build") is build
    assert pipeline.get_step("deploy") is None


def test_from_dict_fields():
    pipeline = Pipeline.from_dict(
        {
            "version": 1,
            "kind": "pipeline",
            "type": "docker",
            "name": "default",
            "depends_on": ["before"],
            "platform": {"os": "linux", "arch": "amd64"},
            "trigger": {"branch": ["master"]},
            "clone": {"disable": "true", "depth": "50"},
        }
    )
    assert pipeline.version == "1"
    assert pipeline.kind == "pipeline"
    assert pipeline.type == "docker"
    assert pipeline.name == "default"
    assert pipeline.deps == ["before"]
    assert pipeline.platform == Platform(os="linux", arch="amd64")
    assert pipeline.trigger == Conditions(branch=Condition(include=["master"]))
    assert pipeline.clone == Clone(disable=True, depth=50)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1GiB", 1073741824),
        ("2gb", 2147483648),
        ("1.5k", 1536),
        ("1 MB", 1048576),
        ("100", 100),
        (512, 512),
        (None, 0),
    ],
)
def test_parse_bytes_size(value, expected):
    assert parse_bytes_size(value) == expected


@pytest.mark.parametrize("value", ["lots", "1.2.3g", "1xb", "-1g"])
def test_parse_bytes_size_invalid(value):
    with pytest.raises(ValueError):
        parse_bytes_size(value)


def test_step_from_dict():
    step = Step.from_dict(
        {
            "name": "build",
            "image": "node",
            "detach": "yes",
            "network_mode": "host",
            "shm_size": "1mb",
            "devices": [{"name": "sda", "path": "/dev/xvda"}],
            "volumes": [{"name": "cache", "path": "/cache"}],
            "when": {"branch": "master", "event": {"exclude": ["pull_request"]}},
        }
    )
    assert step.detach is True
    assert step.network == "host"
    assert step.shm_size == 1048576
    assert step.devices == [VolumeDevice(name="sda", device_path="/dev/xvda")]
    assert step.volumes == [VolumeMount(name="cache", path="/cache")]
    assert step.when.branch == Condition(include=["master"])
    assert step.when.event == Condition(exclude=["pull_request"])


def test_step_from_dict_rejects_bad_types():
    with pytest.raises(ValueError):
        Step.from_dict({"commands": "make build"})
    with pytest.raises(ValueError):
        Step.from_dict({"detach": "maybe"})


def test_volume_from_dict():
    temp = Volume.from_dict({"name": "tmp", "temp": {"medium": "memory", "size_limit": "1k"}})
    assert temp == Volume(name="tmp", empty_dir=VolumeEmptyDir(medium="memory", size_limit=1024))
    host = Volume.from_dict({"name": "cache", "host": {"path": "/tmp/cache"}})
    assert host == Volume(name="cache", host_path=VolumeHostPath(path="/tmp/cache"))


def test_null_step_entries_are_kept():
    pipeline = Pipeline.from_dict({"steps": [None, {"name": "build"}]})
    assert pipeline.steps[0] is None
    assert pipeline.get_step("build") == Step(name="build")