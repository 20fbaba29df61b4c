# dockrunner

Building blocks for a CI runner that executes pipeline steps in Docker
containers:

- `dockrunner.parser` reads `kind: pipeline` / `type: docker` resources from
  YAML (`parse`, `match_resource`, `lint`) into `dockrunner.pipeline.Pipeline`
  objects. `parse` raises `ParseError` on malformed YAML or invalid step names.
- `dockrunner.pipeline` defines the pipeline resource dataclasses and
  `parse_bytes_size` for sizes such as `"1GiB"`.
- `dockrunner.linter.Linter` checks a pipeline against the runner's rules and
  raises `LintError`. For example, untrusted repositories cannot use privileged
  mode, devices, host volumes, in-memory volumes or a custom network.
- `dockrunner.lookup.lookup` finds a named pipeline among parsed resources and
  raises `ResourceNotFoundError` when there is none.
- `dockrunner.spec` describes a compiled pipeline: steps, volumes, network and
  secrets.
- `dockrunner.convert` turns a compiled step into Docker Engine API container,
  host and network configuration dictionaries.
- `dockrunner.image` parses image references (`trim`, `expand`, `match`,
  `match_tag`, `match_hostname`, `is_latest`).
- `dockrunner.stdcopy` multiplexes and demultiplexes Docker's stdout/stderr log
  stream (`StdWriter`, `std_copy`).
- `dockrunner.jsonmessage.copy_messages` renders an image-pull progress stream
  as plain lines and raises `PullError` for errors in the stream.
- `dockrunner.encoder.encode` turns plugin settings into environment strings.
- `dockrunner.match.make_matcher` limits which repositories and events a
  runner accepts.
- `dockrunner.errors.trim_extra_info` strips sensitive trailing detail from
  daemon errors.

## Installation

```
pip install .
```

## Example

```python
from dockrunner.parser import RawResource, parse
from dockrunner.linter import Linter

raw = RawResource(
    kind="pipeline",
    type="docker",
    data=b"""
kind: pipeline
type: docker
name: default
steps:
- name: build
  image: alpine
  commands:
  - make
""",
)
pipeline = parse(raw)
Linter().lint(pipeline, trusted=False)   # raises LintError on a violation
print(pipeline.get_step("build").image)  # alpine
```

```python
from dockrunner.image import expand, is_latest

expand("alpine")        # 'docker.io/library/alpine:latest'
is_latest("alpine:3")   # False
```

## What it does not do

The package has no command-line program and does not talk to a Docker daemon
itself: it does not create, start or remove containers, volumes or networks,
and it does not poll a CI server for work. It produces the configuration
dictionaries and stream handling such a runner needs; sending them to the
Docker Engine API is left to the caller.

## Running the tests

```
pip install .[test]
pytest
```