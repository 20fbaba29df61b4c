"""Pipeline parsing, linting, image references and container configuration for a Docker CI runner."""

__version__ = "0.1.0"