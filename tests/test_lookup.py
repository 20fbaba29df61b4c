from dataclasses import dataclass

import pytest

from dockrunner.lookup import ResourceNotFoundError, is_name_match, lookup
from dockrunner.pipeline import Pipeline


@dataclass
class _Secret:
    kind: str = ""
    name: str = ""


def test_lookup():
    want = Pipeline(name="default")
    assert lookup("default", [want]) is want


def test_lookup_unnamed_default():
    want = Pipeline(name="")
    assert lookup("default", [_Secret(kind="secret", name="default"), want]) is want


def test_lookup_not_found():
    resources = [
        _Secret(kind="secret", name="password"),
        _Secret(kind="secret", name="default"),
    ]
    with pytest.raises(ResourceNotFoundError) as excinfo:
        lookup("default", resources)
    assert str(excinfo.value) == "resource not found"


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("a", "b", False),
        ("a", "a", True),
        ("", "default", True),
        ("default", "", True),
        ("", "other", False),
    ],
)
def test_name_match(a, b, expected):
    assert is_name_match(a, b) is expected