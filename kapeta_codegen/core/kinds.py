"""
Kind identifiers and kind matching.

A kind is written ``[kapeta://]namespace/name[:version]`` and compared
case-insensitively. Kinds select the template set of a generation call
and decide which consumers and providers a template is looking at.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

PROTOCOL = "kapeta://"


@dataclass(frozen=True)
class KindUri:
    """Parsed kind identifier."""

    handle: str
    name: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, kind: str) -> "KindUri":
        """
        Parse a kind string.

        Args:
            kind: e.g. ``kapeta://kapeta/mysql:1.0.0`` or ``kapeta/mysql``

        Returns:
            Parsed KindUri, handle and name may be empty for malformed input
        """
        text = (kind or "").strip()
        if text.lower().startswith(PROTOCOL):
            text = text[len(PROTOCOL):]

        version = None
        if ":" in text:
            text, version = text.split(":", 1)
            version = version or None

        if "/" in text:
            handle, name = text.split("/", 1)
        else:
            handle, name = "", text

        return cls(handle=handle, name=name, version=version)

    @property
    def full_name(self) -> str:
        """Lower-cased ``namespace/name``; empty if either part is missing."""
        if not self.handle or not self.name:
            return ""
        return f"{self.handle}/{self.name}".lower()

    @property
    def normalized(self) -> str:
        """Lower-cased ``kapeta://namespace/name[:version]``."""
        uri = f"{PROTOCOL}{self.handle}/{self.name}"
        if self.version:
            uri = f"{uri}:{self.version}"
        return uri.lower()


def normalize_kind(kind: str) -> str:
    return KindUri.parse(kind).normalized


def kind_matcher(requested: str) -> Callable[[Any], bool]:
    """
    Build a predicate matching resources whose ``kind`` fits ``requested``.

    A trailing ``*`` matches by prefix on the full name, a requested
    version forces an exact comparison of the normalized identifiers and
    anything else compares ``namespace/name`` only.
    """
    requested = (requested or "").lower()

    wildcard = requested.endswith("*")
    if wildcard:
        requested = requested[:-1]
        if requested.startswith(PROTOCOL):
            requested = requested[len(PROTOCOL):]

    def matches(resource: Any) -> bool:
        kind = _kind_of(resource)
        if not kind:
            return False

        uri = KindUri.parse(kind)

        if wildcard:
            return uri.full_name.startswith(requested)

        if ":" in requested.replace(PROTOCOL, "", 1):
            return normalize_kind(requested) == uri.normalized

        return KindUri.parse(requested).full_name == uri.full_name

    return matches


def filter_kinds(resources: Optional[Iterable[Any]], requested: str) -> List[Any]:
    """Return every resource matching ``requested``, in order."""
    if not resources:
        return []
    matches = kind_matcher(requested)
    return [resource for resource in resources if matches(resource)]


def has_kind(resources: Optional[Iterable[Any]], requested: str) -> bool:
    """Check whether any resource matches ``requested``."""
    if not resources:
        return False
    matches = kind_matcher(requested)
    return any(matches(resource) for resource in resources)


def _kind_of(resource: Any) -> Optional[str]:
    if not resource:
        return None
    if isinstance(resource, Mapping):
        kind = resource.get("kind")
    else:
        kind = getattr(resource, "kind", None)
    return kind if isinstance(kind, str) else None
