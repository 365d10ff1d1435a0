"""
Manifest discovery and synthesis.

Main Components:
    - ManifestFetcher: fetches every upstream manifest of a configuration
      concurrently, keeping only the ones that answered with a JSON object
    - merge_manifests: combines the bound manifests into one
      SynthesizedManifest
"""

from .fetcher import ManifestFetcher
from .merger import merge_manifests

__all__ = ["ManifestFetcher", "merge_manifests"]
