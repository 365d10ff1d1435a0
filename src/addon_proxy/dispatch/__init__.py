"""
Request dispatch.

Main Components:
    - DispatchEngine: target selection, concurrent fan-out and merge for
      catalog/meta/stream/subtitles requests
    - LegacyPathAdapter: maps the older GET path convention onto the same
      routing and merge rules
"""

from .engine import DispatchEngine, extract_items
from .legacy import LegacyPathAdapter

__all__ = ["DispatchEngine", "LegacyPathAdapter", "extract_items"]
