"""
Resource routing rules.

Holds the resource table (endpoint name and response key per resource kind),
the dispatch policy per content type, the legacy path prefix table and the
target selection rules shared by the POST dispatch path and the legacy GET
path.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence

from .models import CHANNEL_TYPE, UpstreamBinding


class ResourceKind(str, Enum):
    """Resource kinds served by the proxy."""

    CATALOG = "catalog"
    META = "meta"
    STREAM = "stream"
    SUBTITLES = "subtitles"


class DispatchMode(str, Enum):
    """How results from eligible upstreams are combined."""

    FULL_MERGE = "full_merge"  # Call all targets concurrently, concatenate
    FIRST_MATCH = "first_match"  # Try targets in order, keep first non-empty


@dataclass(frozen=True)
class ResourceSpec:
    """
    Wire details of one resource kind.

    Attributes:
        kind: Resource kind
        endpoint: Path segment on the upstream (``<base>/<endpoint>``)
        key: Response field holding the result array
    """

    kind: ResourceKind
    endpoint: str
    key: str


RESOURCE_SPECS: dict[ResourceKind, ResourceSpec] = {
    ResourceKind.CATALOG: ResourceSpec(ResourceKind.CATALOG, "catalog", "metas"),
    ResourceKind.META: ResourceSpec(ResourceKind.META, "meta", "metas"),
    ResourceKind.STREAM: ResourceSpec(ResourceKind.STREAM, "stream", "streams"),
    ResourceKind.SUBTITLES: ResourceSpec(ResourceKind.SUBTITLES, "subtitles", "subtitles"),
}

# Resources every synthesized manifest declares, independent of upstreams.
DECLARED_RESOURCES: tuple[str, ...] = tuple(kind.value for kind in ResourceKind)

# Checked in order; the first matching prefix wins.
LEGACY_PREFIXES: tuple[tuple[str, ResourceKind], ...] = (
    ("catalog/", ResourceKind.CATALOG),
    ("stream/", ResourceKind.STREAM),
    ("subtitles/", ResourceKind.SUBTITLES),
)


@dataclass(frozen=True)
class DispatchPolicy:
    """
    Dispatch mode per (resource kind, content type).

    Every combination uses ``FULL_MERGE`` unless its content type is listed in
    ``stream_first_match_types``, which only affects stream requests.

    Examples:
        >>> policy = DispatchPolicy(stream_first_match_types=frozenset({"tv"}))
        >>> policy.mode_for(ResourceKind.STREAM, "tv")
        <DispatchMode.FIRST_MATCH: 'first_match'>
        >>> policy.mode_for(ResourceKind.CATALOG, "tv")
        <DispatchMode.FULL_MERGE: 'full_merge'>
    """

    stream_first_match_types: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_types(cls, types: Iterable[str] | None) -> "DispatchPolicy":
        return cls(stream_first_match_types=frozenset(types or ()))

    def mode_for(self, kind: ResourceKind, content_type: Any) -> DispatchMode:
        if kind is ResourceKind.STREAM and content_type in self.stream_first_match_types:
            return DispatchMode.FIRST_MATCH
        return DispatchMode.FULL_MERGE


def select_targets(
    bindings: Sequence[UpstreamBinding],
    kind: ResourceKind,
    item_id: Any,
    content_type: Any,
) -> list[UpstreamBinding]:
    """
    Pick the upstreams eligible to answer a request.

    - catalog/meta: upstreams owning a catalog whose id equals ``item_id``;
      every upstream when ``content_type`` is the channel type.
    - stream: every upstream; for the channel type only upstreams whose
      manifest types include it.
    - subtitles: every upstream.

    Binding order is preserved.
    """
    if kind in (ResourceKind.CATALOG, ResourceKind.META):
        if content_type == CHANNEL_TYPE:
            return list(bindings)
        return [b for b in bindings if b.owns_catalog(item_id)]

    if kind is ResourceKind.STREAM and content_type == CHANNEL_TYPE:
        return [b for b in bindings if b.supports_type(CHANNEL_TYPE)]

    return list(bindings)


@dataclass(frozen=True)
class LegacyRoute:
    """
    A classified legacy path.

    Attributes:
        kind: Resource kind chosen by prefix
        path: Trailing path forwarded verbatim to upstreams
        content_type: Segment 1 of the path, if present
        item_id: Segment 2 of the path with any ``.json`` suffix removed
    """

    kind: ResourceKind
    path: str
    content_type: str | None = None
    item_id: str | None = None


def classify_legacy_path(path: str) -> LegacyRoute | None:
    """
    Classify a legacy ``<resource>/<type>/<id>[/<extra>].json`` path.

    Returns None when no prefix in ``LEGACY_PREFIXES`` matches.

    Examples:
        >>> classify_legacy_path("catalog/movie/top.json").item_id
        'top'
        >>> classify_legacy_path("addon_catalog/all.json") is None
        True
    """
    for prefix, kind in LEGACY_PREFIXES:
        if path.startswith(prefix):
            break
    else:
        return None

    segments = path.split("/")
    content_type = None
    if len(segments) > 1:
        content_type = segments[1].removesuffix(".json") or None
    item_id = None
    if len(segments) > 2:
        item_id = segments[2].removesuffix(".json") or None
    return LegacyRoute(kind=kind, path=path, content_type=content_type, item_id=item_id)


__all__ = [
    "ResourceKind",
    "DispatchMode",
    "ResourceSpec",
    "RESOURCE_SPECS",
    "DECLARED_RESOURCES",
    "LEGACY_PREFIXES",
    "DispatchPolicy",
    "select_targets",
    "LegacyRoute",
    "classify_legacy_path",
]
