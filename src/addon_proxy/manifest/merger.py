"""
Manifest Merger

Pure synthesis of one manifest out of the bound upstream manifests.

Channel-typed catalogs and the ``channel`` type are passed through unchanged:
they are advertised like any other type and routed by the rules in
``addon_proxy.routing``.
"""

from typing import Any, Iterable, Sequence

from ..models import SynthesizedManifest, UpstreamBinding, as_list
from ..routing import DECLARED_RESOURCES

DEFAULT_DESCRIPTION = "Proxy for all of your Stremio addons"


def _ordered_union(lists: Iterable[list[Any]]) -> tuple[Any, ...]:
    """Union of list items, first-seen order. Unhashable items are skipped."""
    seen: dict[Any, None] = {}
    for items in lists:
        for item in items:
            try:
                if item not in seen:
                    seen[item] = None
            except TypeError:
                continue
    return tuple(seen)


def _string_field(manifest: dict[str, Any], key: str) -> str:
    value = manifest.get(key)
    return value if isinstance(value, str) else ""


def merge_manifests(
    config_name: str,
    bindings: Sequence[UpstreamBinding],
    display_name: str | None = None,
    description: str | None = None,
) -> SynthesizedManifest | None:
    """
    Combine upstream manifests into a SynthesizedManifest.

    - resources: fixed declared set
    - types, idPrefixes: union in first-seen order across bindings
    - catalogs: concatenation in binding order, no de-duplication
    - logo, icon: taken from the first binding, "" if absent

    Missing or non-list fields are treated as empty.

    Args:
        config_name: Configuration name, used for the synthesized id and name
        bindings: Bound upstreams, in configuration order
        display_name: Optional name override
        description: Optional description override

    Returns:
        The synthesized manifest, or None if ``bindings`` is empty
    """
    if not bindings:
        return None

    manifests = [b.manifest for b in bindings]
    first = manifests[0]

    catalogs: list[dict[str, Any]] = []
    for manifest in manifests:
        catalogs.extend(as_list(manifest.get("catalogs")))

    return SynthesizedManifest(
        id=f"stremio-proxy-wrapper-{config_name}",
        name=display_name or f"Stremio Proxy Wrapper ({config_name})",
        description=description or DEFAULT_DESCRIPTION,
        resources=DECLARED_RESOURCES,
        types=_ordered_union(as_list(m.get("types")) for m in manifests),
        id_prefixes=_ordered_union(as_list(m.get("idPrefixes")) for m in manifests),
        catalogs=tuple(catalogs),
        logo=_string_field(first, "logo"),
        icon=_string_field(first, "icon"),
    )


__all__ = ["merge_manifests", "DEFAULT_DESCRIPTION"]
