"""
Data models for letter-pair sheets, cache snapshots and status reporting
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

# Letter pairs are stored trimmed and upper-cased
KEY_LENGTH = 2


class Category(Enum):
    """Which sheet an index was built from"""

    CORNER = "corner"
    EDGE = "edge"

    @classmethod
    def default(cls) -> 'Category':
        return cls.CORNER

    @classmethod
    def parse(cls, text: str) -> 'Category':
        """
        Parse a category tag case-insensitively

        Raises:
            ValueError: If the tag is not a known category
        """
        try:
            return cls(text.strip().lower())
        except (AttributeError, ValueError):
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown category '{text}' (expected one of: {valid})")

    def other(self) -> 'Category':
        return Category.EDGE if self is Category.CORNER else Category.CORNER

    @property
    def label(self) -> str:
        return "Corners" if self is Category.CORNER else "Edges"


class Entry(NamedTuple):
    """A single sheet row: optional note plus the algorithm string"""

    note: str
    value: str

    @classmethod
    def from_pair(cls, data: Any) -> 'Entry':
        """Rebuild an entry from its serialized ``[note, value]`` form"""
        if not isinstance(data, (list, tuple)) or len(data) != 2:
            raise ValueError(f"Entry must be a [note, value] pair, got {data!r}")

        note, value = data
        if not isinstance(note, str) or not isinstance(value, str):
            raise ValueError(f"Entry fields must be strings, got {data!r}")
        if not value:
            raise ValueError("Entry value must not be empty")

        return cls(note, value)


# Letter pair -> entries in sheet order
Index = Dict[str, List[Entry]]


def index_to_dict(index: Index) -> Dict[str, List[List[str]]]:
    """Convert an index to plain JSON-friendly lists"""
    return {key: [[entry.note, entry.value] for entry in entries]
            for key, entries in index.items()}


def index_from_dict(data: Any) -> Index:
    """
    Rebuild an index from its serialized form

    Raises:
        ValueError: If the payload does not have the expected shape
    """
    if not isinstance(data, dict):
        raise ValueError(f"Index must be an object, got {type(data).__name__}")

    index: Index = {}
    for key, entries in data.items():
        if not isinstance(key, str) or len(key) != KEY_LENGTH or key != key.strip().upper():
            raise ValueError(f"Invalid key {key!r}")
        if not isinstance(entries, list):
            raise ValueError(f"Entries for '{key}' must be a list")
        index[key] = [Entry.from_pair(entry) for entry in entries]

    return index


@dataclass
class CacheSnapshot:
    """The single persisted copy of both sheets"""

    captured_at_ms: int
    captured_at_text: str
    corner: Index = field(default_factory=dict)
    edge: Index = field(default_factory=dict)

    def index_for(self, category: Category) -> Index:
        return self.corner if category is Category.CORNER else self.edge

    @property
    def captured_at(self) -> datetime:
        return datetime.fromtimestamp(self.captured_at_ms / 1000)

    def age(self, now: Optional[datetime] = None) -> timedelta:
        return (now or datetime.now()) - self.captured_at

    def is_older_than(self, max_age: timedelta, now: Optional[datetime] = None) -> bool:
        """Informational only; cached data stays usable regardless of age"""
        return self.age(now) > max_age

    def to_dict(self) -> Dict[str, Any]:
        return {
            'time': self.captured_at_ms,
            'time_text': self.captured_at_text,
            'corner': index_to_dict(self.corner),
            'edge': index_to_dict(self.edge),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheSnapshot':
        """
        Create a snapshot from its serialized payload

        Raises:
            ValueError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot payload must be an object")

        try:
            captured_at_ms = data['time']
            captured_at_text = data['time_text']
            corner = data['corner']
            edge = data['edge']
        except KeyError as e:
            raise ValueError(f"Snapshot payload missing field {e}")

        if not isinstance(captured_at_ms, int) or isinstance(captured_at_ms, bool):
            raise ValueError("Snapshot time must be an integer")
        if not isinstance(captured_at_text, str):
            raise ValueError("Snapshot time_text must be a string")

        return cls(
            captured_at_ms=captured_at_ms,
            captured_at_text=captured_at_text,
            corner=index_from_dict(corner),
            edge=index_from_dict(edge)
        )


@dataclass
class ParseReport:
    """Line-level diagnostics from parsing one sheet"""

    accepted: int = 0
    blank: int = 0
    malformed: int = 0  # fewer than two fields
    rejected: int = 0   # bad key length or empty value
    keys: int = 0

    @property
    def discarded(self) -> int:
        return self.malformed + self.rejected

    def to_dict(self) -> Dict[str, int]:
        return {
            'accepted': self.accepted,
            'blank': self.blank,
            'malformed': self.malformed,
            'rejected': self.rejected,
            'discarded': self.discarded,
            'keys': self.keys,
        }


class Status(Enum):
    """Status classifications shown to the user"""

    LOADED_FROM_CACHE = "Loaded from cache"
    NO_CACHE_FETCHING = "No cache - fetching..."
    UPDATING = "Updating..."
    UPDATED = "Updated"
    OFFLINE_USING_CACHE = "Offline - using cache"
    NO_DATA = "No data available"
    FOUND = "Found"
    NO_RESULTS = "No results"
    CLEARED = "Cleared"
    SWITCHED = "Switched"
    IDLE = "Ready"


@dataclass
class StatusReport:
    """A status label plus the optional 'last updated' annotation"""

    status: Status
    last_updated: Optional[str] = None
    detail: Optional[str] = None

    @property
    def label(self) -> str:
        if self.detail:
            return f"{self.status.value} {self.detail}"
        return self.status.value

    def render(self) -> str:
        if self.last_updated:
            return f"{self.label} • Last: {self.last_updated}"
        return self.label

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.name,
            'label': self.label,
            'last_updated': self.last_updated,
            'text': self.render(),
        }
