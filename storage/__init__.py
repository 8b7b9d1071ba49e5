"""
Local storage layer for the letter-pair sheets
Keeps the offline snapshot used when the sheets cannot be fetched
"""

from .cache import SnapshotCache, CACHE_MAX_AGE

__all__ = ['SnapshotCache', 'CACHE_MAX_AGE']
