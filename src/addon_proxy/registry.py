"""
Upstream Registry

Turns the raw list of addon URLs from a configuration source into the ordered
set of canonical base URLs the proxy talks to.
"""

import re
from typing import Any, Iterable

_MANIFEST_SUFFIX = re.compile(r"/manifest\.json$", re.IGNORECASE)
_TRAILING_SLASHES = re.compile(r"/+$")


def normalize_base(raw: Any) -> str:
    """
    Canonicalize one upstream URL.

    Strips surrounding whitespace, trailing ``/manifest.json`` (any case)
    and trailing slashes. Non-string input yields an empty string.

    Examples:
        >>> normalize_base("  https://addon.example.com/manifest.json ")
        'https://addon.example.com'
        >>> normalize_base("https://addon.example.com///")
        'https://addon.example.com'
    """
    if not isinstance(raw, str):
        return ""
    base = raw.strip()
    # Repeat until stable so "x/manifest.json/" and similar settle in one call.
    while True:
        stripped = _TRAILING_SLASHES.sub("", _MANIFEST_SUFFIX.sub("", base))
        if stripped == base:
            return base
        base = stripped


def normalize_bases(raw: Iterable[Any] | None) -> list[str]:
    """
    Normalize and deduplicate a list of upstream URLs.

    Empty entries are dropped and duplicates are removed keeping the first
    occurrence, so ``normalize_bases(normalize_bases(x)) == normalize_bases(x)``.

    Args:
        raw: Upstream URLs as listed in a configuration source

    Returns:
        Ordered list of canonical base URLs
    """
    if not raw or isinstance(raw, (str, bytes)):
        return []

    seen: dict[str, None] = {}
    for item in raw:
        base = normalize_base(item)
        if base and base not in seen:
            seen[base] = None
    return list(seen)


def join_url(base: str, path: str) -> str:
    """Join a canonical base with a relative upstream path."""
    return f"{base}/{path.lstrip('/')}"


__all__ = ["normalize_base", "normalize_bases", "join_url"]
