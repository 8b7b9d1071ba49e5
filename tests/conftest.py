"""
Pytest configuration and fixtures for the letter-pair lookup tests.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to Python path so the top-level packages import
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from api.client import TransientError
from api.models import Category
from lookup.session import LookupSession
from storage.cache import SnapshotCache


CORNER_TSV = (
    "Buffer UFR\tAB\tR U R' D R U' R' D'\r\n"
    "\tAC\tU R U' R' D R U R' D' U'\r\n"
    "ab second\tab\tshould never be surfaced\r\n"
    "AD\tR' D R U2 R' D' R U2\r\n"
    "\r\n"
    "too short\r\n"
    "x\tA\tvalue\r\n"
)

EDGE_TSV = (
    "UF buffer\tAB\tM' U M U2 M' U M\n"
    "\tBC\t\n"
    "CD\tR2 U M U2 M' U R2\n"
)


class FakeSheetClient:
    """Stands in for SheetClient; returns canned text or raises per category."""

    def __init__(self, texts=None, failures=None):
        self.texts = texts or {Category.CORNER: CORNER_TSV, Category.EDGE: EDGE_TSV}
        self.failures = failures or {}
        self.calls = []

    def fetch_sheet(self, category):
        self.calls.append(category)
        if category in self.failures:
            raise self.failures[category]
        return self.texts[category]


class FixedClock:
    """Callable clock that can be moved forward in tests."""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 3, 14, 9, 26, 53)

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def cache(tmp_path, clock):
    return SnapshotCache(tmp_path / "lookup.db", clock=clock)


@pytest.fixture
def session():
    return LookupSession()


@pytest.fixture
def client():
    return FakeSheetClient()


@pytest.fixture
def failing_client():
    return FakeSheetClient(failures={
        Category.CORNER: TransientError("Connection error fetching corner sheet"),
        Category.EDGE: TransientError("Connection error fetching edge sheet"),
    })
