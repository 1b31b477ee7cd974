"""
Property query engine package.

Pure functions over in-memory property records:
- filtering: multi-field predicate filtering
- search: free-text relevance scoring
- fuzzy: fuzzy-substring bonus used by search
- sorting: keyed, non-destructive ordering
- stats: aggregate price/type/bedroom statistics
"""

from property_engine.engine.filtering import filter_properties
from property_engine.engine.search import search_properties
from property_engine.engine.sorting import sort_properties
from property_engine.engine.stats import compute_stats


__all__ = [
    "compute_stats",
    "filter_properties",
    "search_properties",
    "sort_properties",
]
