"""
Letter-pair sheet access: remote client, parser and data models
"""

from .client import SheetClient, SheetFetchError, TransientError, PermanentError
from .models import Category, Entry, Index, CacheSnapshot, ParseReport, Status, StatusReport
from .parser import parse_tsv, parse_tsv_with_report

__all__ = [
    'SheetClient', 'SheetFetchError', 'TransientError', 'PermanentError',
    'Category', 'Entry', 'Index', 'CacheSnapshot', 'ParseReport', 'Status', 'StatusReport',
    'parse_tsv', 'parse_tsv_with_report'
]
