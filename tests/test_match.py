import pytest

from dockrunner.match import Build, Repo, make_matcher

ORGS = ["spaceghost/*", "octocat/*"]


@pytest.mark.parametrize(
    "slug, event, trusted, matcher, expected",
    [
        ("octocat/hello-world", "push", True, make_matcher(ORGS, ["push"], True), True),
        ("octocat/hello-world", "pull_request", False, make_matcher(ORGS, [], False), True),
        ("octocat/hello-world", "pull_request", False,
         make_matcher(["!spaceghost/*", "octocat/*"], [], False), True),
        ("octocat/hello-world", "pull_request", False,
         make_matcher([], ["pull_request"], False), True),
        ("octocat/hello-world", "pull_request", True, make_matcher([], [], True), True),
        ("spaceghost/hello-world", "pull_request", False,
         make_matcher(["octocat/*"], [], False), False),
        ("spaceghost/hello-world", "pull_request", False,
         make_matcher(["!spaceghost/*"], [], False), False),
        ("spaceghost/hello-world", "pull_request", False,
         make_matcher(["!spaceghost/hello-world"], [], False), False),
        ("octocat/hello-world", "pull_request", False, make_matcher([], ["push"], False), False),
        ("octocat/hello-world", "pull_request", False, make_matcher([], [], True), False),
        ("foo/hello-world", "push", True, make_matcher(ORGS, ["push"], True), False),
        ("octocat/hello-world", "pull_request", True, make_matcher(ORGS, ["push"], True), False),
        ("octocat/hello-world", "push", False, make_matcher(ORGS, ["push"], True), False),
    ],
)
def test_matcher(slug, event, trusted, matcher, expected):
    assert matcher(Repo(slug=slug, trusted=trusted), Build(event=event)) is expected


def test_star_does_not_cross_slash():
    matcher = make_matcher(["octocat*"], [], False)
    assert matcher(Repo(slug="octocat/hello-world"), Build(event="push")) is False


def test_character_class_and_negation():
    matcher = make_matcher(["octo[a-c]at/*", "[^x]oo/bar"], [], False)
    assert matcher(Repo(slug="octocat/hello"), Build()) is True
    assert matcher(Repo(slug="octodat/hello"), Build()) is False
    assert matcher(Repo(slug="foo/bar"), Build()) is True
    assert matcher(Repo(slug="xoo/bar"), Build()) is False


def test_malformed_pattern_never_matches():
    matcher = make_matcher(["octocat/[", "octocat/\\"], [], False)
    assert matcher(Repo(slug="octocat/["), Build()) is False