"""
Letter-pair resolution: first entry wins
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from api.models import KEY_LENGTH, Category, Entry, Index, Status, StatusReport

from .session import LookupSession

logger = logging.getLogger(__name__)


def lookup(key: str, index: Index) -> Optional[Entry]:
    """
    Return the first entry stored for a key

    Later rows for the same key stay in the index but are never surfaced.

    Args:
        key: Normalized two-character key
        index: Sheet index to search

    Returns:
        First entry, or None if the key has no entries
    """
    entries = index.get(key)
    if not entries:
        return None
    return entries[0]


def normalize_key(raw: str) -> str:
    """
    Trim and upper-case user input

    Raises:
        ValueError: If the result is not exactly two characters
    """
    key = (raw or "").strip().upper()
    if len(key) != KEY_LENGTH:
        raise ValueError(f"Key must be exactly {KEY_LENGTH} characters, got '{key}'")
    return key


@dataclass
class LookupResult:
    """Outcome of resolving one key"""

    key: str
    category: Category
    entry: Optional[Entry] = None
    status: Optional[StatusReport] = None

    @property
    def found(self) -> bool:
        return self.entry is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'category': self.category.value,
            'found': self.found,
            'note': self.entry.note if self.entry else None,
            'value': self.entry.value if self.entry else None,
        }


class LookupEngine:
    """Resolves keys against a session's indices and updates its status"""

    def __init__(self, session: LookupSession):
        self.session = session

    def resolve(self, raw_key: str, category: Optional[Category] = None) -> LookupResult:
        """
        Look a key up in the given (or active) category

        Args:
            raw_key: User input, case-insensitive
            category: Category to search, defaults to the active one

        Returns:
            LookupResult with the first matching entry, if any

        Raises:
            ValueError: If the key is not two characters long
        """
        key = normalize_key(raw_key)
        category = category or self.session.active

        entry = lookup(key, self.session.index_for(category))
        if entry is None:
            logger.debug(f"No {category.value} entry for {key}")

        with self.session.lock:
            self.session.last_result = entry
            report = self.session.set_status(Status.FOUND if entry is not None else Status.NO_RESULTS)

        return LookupResult(key=key, category=category, entry=entry, status=report)
