"""Image reference parsing and normalization.

Follows the docker distribution reference grammar:

    reference   := name [ ":" tag ] [ "@" digest ]
    name        := [ domain "/" ] path-component [ "/" path-component ]*
    domain      := host [ ":" port-number ]

Names without a domain belong to Docker Hub (``docker.io``), and single
component Hub names live under ``library/``.
"""

import re
from dataclasses import dataclass
from typing import Optional

from docker.utils import parse_repository_tag

from ..models.errors import ReferenceParseError

DEFAULT_DOMAIN = "docker.io"
LEGACY_DEFAULT_DOMAIN = "index.docker.io"
OFFICIAL_REPO_PREFIX = "library/"
DEFAULT_TAG = "latest"
NAME_TOTAL_LENGTH_MAX = 255

_ALPHA_NUMERIC = r"[a-z0-9]+"
_SEPARATOR = r"(?:[._]|__|[-]+)"
_PATH_COMPONENT = rf"{_ALPHA_NUMERIC}(?:{_SEPARATOR}{_ALPHA_NUMERIC})*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_IPV6_ADDRESS = r"\[(?:[a-fA-F0-9:]+)\]"
_HOST = rf"(?:{_DOMAIN_COMPONENT}(?:\.{_DOMAIN_COMPONENT})*|{_IPV6_ADDRESS})"
_DOMAIN = rf"{_HOST}(?::[0-9]+)?"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"
_NAME = rf"(?:{_DOMAIN}/)?{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*"

REFERENCE_RE = re.compile(rf"({_NAME})(?::({_TAG}))?(?:@({_DIGEST}))?", re.ASCII)
ANCHORED_IDENTIFIER_RE = re.compile(r"[a-f0-9]{64}", re.ASCII)


@dataclass(frozen=True)
class NamedReference:
    """A parsed, normalized image reference."""

    domain: str
    path: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    @property
    def name(self) -> str:
        return f"{self.domain}/{self.path}"

    def __str__(self) -> str:
        ref = self.name
        if self.tag:
            ref += f":{self.tag}"
        if self.digest:
            ref += f"@{self.digest}"
        return ref


def split_docker_domain(name: str) -> tuple[str, str]:
    """Split a repository name into domain and remainder, applying Hub defaults."""
    first, sep, rest = name.partition("/")
    if (
        not sep
        or (
            not any(c in first for c in ".:")
            and first != "localhost"
            and first.lower() == first
        )
    ):
        domain, remainder = DEFAULT_DOMAIN, name
    else:
        domain, remainder = first, rest

    if domain == LEGACY_DEFAULT_DOMAIN:
        domain = DEFAULT_DOMAIN
    if domain == DEFAULT_DOMAIN and "/" not in remainder:
        remainder = OFFICIAL_REPO_PREFIX + remainder
    return domain, remainder


def parse_normalized_named(reference: str) -> NamedReference:
    """Parse a user supplied reference such as ``alpine`` or ``ghcr.io/o/r:1``.

    Raises:
        ReferenceParseError: the string is not a valid named reference
    """
    if not reference:
        raise ReferenceParseError(reference, "repository name must have at least one component")
    if ANCHORED_IDENTIFIER_RE.fullmatch(reference):
        raise ReferenceParseError(
            reference, "cannot specify 64-byte hexadecimal strings"
        )

    domain, remainder = split_docker_domain(reference)
    remote_name = remainder.split(":", 1)[0].split("@", 1)[0]
    if remote_name.lower() != remote_name:
        raise ReferenceParseError(reference, "repository name must be lowercase")

    candidate = f"{domain}/{remainder}"
    match = REFERENCE_RE.fullmatch(candidate)
    if match is None:
        raise ReferenceParseError(reference, "invalid reference format")

    name, tag, digest = match.groups()
    if len(name) > NAME_TOTAL_LENGTH_MAX:
        raise ReferenceParseError(
            reference,
            f"repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters",
        )

    return NamedReference(
        domain=domain,
        path=name[len(domain) + 1 :],
        tag=tag,
        digest=digest,
    )


def with_default_tag(image: str) -> str:
    """Append ``:latest`` when the reference carries no tag.

    A registry port (``host:5000/repo``) is not a tag; digest references are
    returned unchanged.
    """
    _, tag = parse_repository_tag(image)
    if tag is None:
        return f"{image}:{DEFAULT_TAG}"
    return image
