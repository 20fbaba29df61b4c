"""Helpers for cleaning up errors reported by the Docker daemon."""

_EXTRA_INFO = "extra info:"


def trim_extra_info(err):
    """Strip the trailing "extra info" section from a Docker error.

    On Windows this section can expose environment variables and other
    sensitive data. Returns None for None, the same error when there is
    nothing to trim, and a new RuntimeError otherwise.
    """
    if err is None:
        return None
    text = str(err)
    index = text.find(_EXTRA_INFO)
    if index <= 0:
        return err
    text = text[:index].strip()
    text = text.removesuffix("(0x2)").strip()
    return RuntimeError(text)