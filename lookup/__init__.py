"""
Lookup core: session state, sheet acquisition and key resolution
"""

from .session import LookupSession
from .engine import LookupEngine, LookupResult, lookup, normalize_key
from .acquisition import AcquisitionController, fetch_both

__all__ = [
    'LookupSession',
    'LookupEngine', 'LookupResult', 'lookup', 'normalize_key',
    'AcquisitionController', 'fetch_both'
]
