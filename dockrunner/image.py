"""Parsing and matching of container image references."""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

_DEFAULT_DOMAIN = "docker.io"
_LEGACY_DEFAULT_DOMAIN = "index.docker.io"
_OFFICIAL_REPO_NAME = "library"
_DEFAULT_TAG = "latest"
_NAME_TOTAL_LENGTH_MAX = 255

_ALPHA_NUMERIC = r"[a-z0-9]+"
# An empty separator only joins two alphanumeric runs, so it is left out
# to keep the expression free of ambiguous splits.
_SEPARATOR = r"(?:[._]|__|-+)"
_NAME_COMPONENT = rf"{_ALPHA_NUMERIC}(?:{_SEPARATOR}{_ALPHA_NUMERIC})*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = rf"{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*(?::[0-9]+)?"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9A-Fa-f]{32,}"
_PATH = rf"{_NAME_COMPONENT}(?:/{_NAME_COMPONENT})*"
_NAME = rf"(?:{_DOMAIN}/)?{_PATH}"

_REFERENCE_RE = re.compile(rf"({_NAME})(?::({_TAG}))?(?:@({_DIGEST}))?", re.ASCII)
_ANCHORED_NAME_RE = re.compile(rf"(?:({_DOMAIN})/)?({_PATH})", re.ASCII)
_IDENTIFIER_RE = re.compile(r"[a-f0-9]{64}")

_DIGEST_LENGTHS = {"sha256": 64, "sha384": 96, "sha512": 128}


class _InvalidReference(ValueError):
    pass


@dataclass(frozen=True)
class _Reference:
    domain: str = ""
    path: str = ""
    tag: str = ""
    digest: str = ""

    @property
    def name(self):
        return f"{self.domain}/{self.path}" if self.domain else self.path

    def __str__(self):
        if not self.path:
            return self.digest
        text = self.name
        if self.tag:
            text += ":" + self.tag
        if self.digest:
            text += "@" + self.digest
        return text


def _validate_digest(text):
    index = text.find(":")
    if index <= 0 or index + 1 == len(text):
        raise _InvalidReference("invalid checksum digest format")
    algorithm, encoded = text[:index], text[index + 1:]
    length = _DIGEST_LENGTHS.get(algorithm)
    if length is None:
        raise _InvalidReference("unsupported digest algorithm")
    if not re.fullmatch(rf"[a-f0-9]{{{length}}}", encoded):
        raise _InvalidReference("invalid checksum digest format")


def _parse(text):
    found = _REFERENCE_RE.fullmatch(text)
    if found is None:
        if not text:
            raise _InvalidReference("repository name must have at least one component")
        if _REFERENCE_RE.fullmatch(text.lower()):
            raise _InvalidReference("repository name must be lowercase")
        raise _InvalidReference("invalid reference format")
    name, tag, digest = found.groups()
    if len(name) > _NAME_TOTAL_LENGTH_MAX:
        raise _InvalidReference("repository name must not be more than 255 characters")
    parts = _ANCHORED_NAME_RE.fullmatch(name)
    if digest:
        _validate_digest(digest)
    return _Reference(parts.group(1) or "", parts.group(2), tag or "", digest or "")


def _split_docker_domain(name):
    head, slash, tail = name.partition("/")
    if not slash or ("." not in head and ":" not in head and head != "localhost"):
        domain, remainder = _DEFAULT_DOMAIN, name
    else:
        domain, remainder = head, tail
    if domain == _LEGACY_DEFAULT_DOMAIN:
        domain = _DEFAULT_DOMAIN
    if domain == _DEFAULT_DOMAIN and "/" not in remainder:
        remainder = f"{_OFFICIAL_REPO_NAME}/{remainder}"
    return domain, remainder


def _parse_normalized(text):
    if _IDENTIFIER_RE.fullmatch(text):
        raise _InvalidReference("cannot specify 64-byte hexadecimal strings")
    domain, remainder = _split_docker_domain(text)
    remote = remainder.partition(":")[0]
    if remote.lower() != remote:
        raise _InvalidReference("repository name must be lowercase")
    ref = _parse(f"{domain}/{remainder}")
    if not ref.path:
        raise _InvalidReference("reference is not named")
    return ref


def _parse_any(text):
    if _IDENTIFIER_RE.fullmatch(text):
        return _Reference(digest="sha256:" + text)
    try:
        _validate_digest(text)
    except _InvalidReference:
        return _parse_normalized(text)
    return _Reference(digest=text)


def _parse_named(text):
    ref = _parse_normalized(text)
    if str(ref) != text:
        raise _InvalidReference("repository name must be canonical")
    return ref


def _canonical(name):
    return _parse_named(str(_parse_any(name)))


def _familiar_name(ref):
    if ref.domain == _DEFAULT_DOMAIN:
        parts = ref.path.split("/")
        if len(parts) == 2 and parts[0] == _OFFICIAL_REPO_NAME:
            return parts[1]
        return ref.path
    return ref.name


def trim(name):
    """Return the short image name without tag, or the input if invalid."""
    try:
        ref = _canonical(name)
    except _InvalidReference:
        return name
    return _familiar_name(ref)


def expand(name):
    """Return the fully qualified image name, or the input if invalid."""
    try:
        ref = _canonical(name)
    except _InvalidReference:
        return name
    if not ref.tag and not ref.digest:
        ref = _Reference(ref.domain, ref.path, _DEFAULT_TAG, "")
    return str(ref)


def match(image, *args):
    """Return True if the image matches any of the others, ignoring tags."""
    trimmed = trim(image)
    return any(trimmed == trim(candidate) for candidate in args)


def match_tag(a, b):
    """Return True if both images are the same, tag included."""
    return expand(a) == expand(b)


def match_hostname(image, hostname):
    """Return True if the image's registry host is the given hostname."""
    try:
        ref = _canonical(image)
    except _InvalidReference:
        return False
    if hostname == _LEGACY_DEFAULT_DOMAIN:
        hostname = _DEFAULT_DOMAIN
    if hostname.startswith(("http://", "https://")):
        try:
            hostname = urlsplit(hostname).netloc.rpartition("@")[2]
        except ValueError:
            pass
    return ref.domain == hostname


def is_latest(name):
    """Return True if the image uses the :latest tag."""
    return expand(name).endswith(":latest")