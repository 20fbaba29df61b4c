"""Lookup of a named pipeline among parsed resources."""

from .pipeline import Pipeline


class ResourceNotFoundError(LookupError):
    """No pipeline with the requested name exists."""

    def __init__(self, message="resource not found"):
        super().__init__(message)


def is_name_match(a, b):
    """Return True if two resource names match, treating "" as "default"."""
    return a == b or (a == "" and b == "default") or (b == "" and a == "default")


def lookup(name, resources):
    """Return the pipeline with the given name from resources."""
    for resource in resources:
        if not is_name_match(getattr(resource, "name", ""), name):
            continue
        if isinstance(resource, Pipeline):
            return resource
    raise ResourceNotFoundError()