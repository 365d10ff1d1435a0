"""
Core data model for the aggregation proxy.

Configuration sources are loaded from disk, turned into ``UpstreamBinding``
lists by the manifest fetcher and merged into a ``SynthesizedManifest``. The
resulting ``Configuration`` values are immutable.
"""

import copy
from dataclasses import dataclass, field
from typing import Any

CHANNEL_TYPE = "channel"


def as_list(value: Any) -> list[Any]:
    """Return ``value`` if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


@dataclass(frozen=True)
class ConfigSource:
    """
    One parsed configuration source.

    Attributes:
        name: Configuration name (the source file stem)
        addon_urls: Upstream URLs exactly as listed in the source
        display_name: Optional manifest name override
        description: Optional manifest description override
        origin: Where the source was read from, for diagnostics
    """

    name: str
    addon_urls: tuple[Any, ...] = ()
    display_name: str | None = None
    description: str | None = None
    origin: str | None = None


@dataclass(frozen=True)
class UpstreamBinding:
    """
    An upstream base URL paired with the manifest it served.

    Only upstreams that returned a JSON object manifest are ever bound.
    """

    base: str
    manifest: dict[str, Any]

    @property
    def catalogs(self) -> list[dict[str, Any]]:
        return [c for c in as_list(self.manifest.get("catalogs")) if isinstance(c, dict)]

    @property
    def types(self) -> list[Any]:
        return as_list(self.manifest.get("types"))

    def owns_catalog(self, catalog_id: Any) -> bool:
        """True when one of this upstream's own catalogs has ``catalog_id``."""
        return any(c.get("id") == catalog_id for c in self.catalogs)

    def supports_type(self, content_type: Any) -> bool:
        return content_type in self.types


@dataclass(frozen=True)
class SynthesizedManifest:
    """
    Unified manifest exposed to clients for one configuration.

    ``catalogs`` is also the routing table: an upstream answers for catalog X
    iff one of its own catalogs has id X.
    """

    id: str
    name: str
    description: str
    resources: tuple[str, ...]
    types: tuple[Any, ...] = ()
    id_prefixes: tuple[Any, ...] = ()
    catalogs: tuple[dict[str, Any], ...] = ()
    logo: str = ""
    icon: str = ""
    version: str = "1.0.0"
    manifest_version: str = "4"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format. Catalog entries are copied."""
        return {
            "manifestVersion": self.manifest_version,
            "id": self.id,
            "version": self.version,
            "name": self.name,
            "description": self.description,
            "resources": list(self.resources),
            "types": list(self.types),
            "idPrefixes": list(self.id_prefixes),
            "catalogs": copy.deepcopy(list(self.catalogs)),
            "logo": self.logo,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class Configuration:
    """
    A fully built configuration.

    ``manifest`` is None when no upstream could be bound; such a configuration
    answers manifest lookups with "not found" and resources with empty lists.
    """

    name: str
    bases: tuple[str, ...] = ()
    bindings: tuple[UpstreamBinding, ...] = field(default_factory=tuple)
    manifest: SynthesizedManifest | None = None

    @property
    def initialized(self) -> bool:
        return self.manifest is not None and bool(self.bindings)


__all__ = [
    "CHANNEL_TYPE",
    "as_list",
    "ConfigSource",
    "UpstreamBinding",
    "SynthesizedManifest",
    "Configuration",
]
