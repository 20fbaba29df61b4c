"""Matching of repositories and build events against allow lists."""

import re
from dataclasses import dataclass
from functools import lru_cache


@dataclass
class Repo:
    """The repository a build belongs to."""

    slug: str = ""
    trusted: bool = False


@dataclass
class Build:
    """A build to be matched."""

    event: str = ""


class _BadPattern(ValueError):
    pass


def _class_char(pattern, index):
    if index >= len(pattern) or pattern[index] in "-]":
        raise _BadPattern(pattern)
    if pattern[index] == "\\":
        index += 1
        if index >= len(pattern):
            raise _BadPattern(pattern)
    return pattern[index], index + 1


def _translate_class(pattern, index):
    negate = index < len(pattern) and pattern[index] == "^"
    if negate:
        index += 1
    ranges = []
    while True:
        if index < len(pattern) and pattern[index] == "]" and ranges:
            index += 1
            break
        low, index = _class_char(pattern, index)
        high = low
        if index < len(pattern) and pattern[index] == "-":
            high, index = _class_char(pattern, index + 1)
        ranges.append((low, high))
    body = "".join(
        f"{re.escape(low)}-{re.escape(high)}" for low, high in ranges if low <= high
    )
    if not body:
        return ("(?s:.)" if negate else "(?!)"), index
    return (f"[^{body}]" if negate else f"[{body}]"), index


@lru_cache(maxsize=256)
def _compile(pattern):
    parts = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        index += 1
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "\\":
            if index >= len(pattern):
                raise _BadPattern(pattern)
            parts.append(re.escape(pattern[index]))
            index += 1
        elif char == "[":
            part, index = _translate_class(pattern, index)
            parts.append(part)
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def _path_match(pattern, name):
    try:
        return _compile(pattern).fullmatch(name) is not None
    except _BadPattern:
        return False


def _match(value, patterns):
    if not patterns:
        return True
    return any(_path_match(pattern, value) for pattern in patterns)


def make_matcher(repos, events, trusted):
    """Return a function telling whether a repository and build are allowed.

    Empty pattern lists allow everything; with trusted set, only trusted
    repositories are allowed.
    """
    repos = list(repos or ())
    events = list(events or ())

    def matcher(repo, build):
        if trusted and not repo.trusted:
            return False
        return _match(repo.slug, repos) and _match(build.event, events)

    return matcher