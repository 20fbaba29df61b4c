"""Parsing of raw manifest resources into docker pipelines."""

import re
from dataclasses import dataclass, field

import yaml

from .pipeline import KIND, TYPE, Pipeline


class ParseError(ValueError):
    """The resource could not be parsed or failed validation."""


@dataclass
class RawResource:
    """A manifest document together with its header fields."""

    version: str = ""
    kind: str = ""
    type: str = ""
    name: str = ""
    deps: list = field(default_factory=list)
    data: bytes = b""


class _Loader(yaml.SafeLoader):
    """Loads plain scalars as text, resolving only nulls and merge keys."""

    yaml_implicit_resolvers = {}


_Loader.add_implicit_resolver(
    "tag:yaml.org,2002:null", re.compile(r"^(?:~|null|Null|NULL|)$"), ["~", "n", "N", ""]
)
_Loader.add_implicit_resolver("tag:yaml.org,2002:merge", re.compile(r"^(?:<<)$"), ["<"])


def match_resource(raw):
    """Return True if the raw resource is a docker pipeline."""
    return raw.kind == KIND and raw.type in (TYPE, "")


def lint(pipeline):
    """Check that every step exists and has a unique, valid name."""
    names = set()
    for step in pipeline.steps:
        if step is None:
            raise ParseError("Linter: detected nil step")
        if not step.name:
            raise ParseError("Linter: invalid or missing step name")
        if len(step.name.encode("utf-8")) > 100:
            raise ParseError("Linter: step name cannot exceed 100 characters")
        if step.name in names:
            raise ParseError("Linter: duplicate step name")
        names.add(step.name)


def parse(raw):
    """Return the pipeline of a matching raw resource, or None if it does not match."""
    if not match_resource(raw):
        return None
    try:
        data = yaml.load(raw.data, Loader=_Loader)
        pipeline = Pipeline.from_dict(data)
    except (yaml.YAMLError, ValueError) as exc:
        raise ParseError(str(exc)) from exc
    lint(pipeline)
    return pipeline