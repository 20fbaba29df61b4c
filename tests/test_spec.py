from dockrunner.spec import Secret, Spec, Step


def test_secret_value_is_text_of_data():
    secret = Secret(name="token", env="TOKEN", data=b"token", mask=True)
    assert secret.value() == "token"


def test_clone_copies_environment():
    step = Step(name="build", image="node", envs={"TARGET_OS": "linux"})
    copy = step.clone()
    copy.envs["TARGET_ARCH"] = "arm64"
    assert step.envs == {"TARGET_OS": "linux"}
    assert copy.envs == {"TARGET_OS": "linux", "TARGET_ARCH": "arm64"}
    assert copy.name == "build"
    assert copy.image == "node"


def test_clone_is_a_distinct_object():
    step = Step(name="test")
    copy = step.clone()
    copy.name = "other"
    assert step.name == "test"


def test_clone_of_empty_environment():
    copy = Step(envs={}).clone()
    assert copy.envs == {}


def test_spec_defaults_are_independent():
    first = Spec()
    second = Spec()
    first.steps.append(Step(name="a"))
    assert second.steps == []
    assert len(first.steps) == 1