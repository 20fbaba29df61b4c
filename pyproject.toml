[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "dockrunner"
version = "0.1.0"
description = "Pipeline resources, linting and container configuration helpers for a Docker-based CI runner"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["ci", "pipeline", "docker", "runner", "linter", "containers"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["dockrunner*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
