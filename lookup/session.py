"""
Per-session lookup state: both sheet indices, the active category and the
latest status
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from api.models import Category, Entry, Index, ParseReport, Status, StatusReport

logger = logging.getLogger(__name__)


@dataclass
class LookupSession:
    """
    Mutable state shared by the acquisition controller and the lookup engine

    The controller is the only writer of the indices; the surfaces (CLI, web)
    own the category selector. Sessions are independent of each other.
    """

    corner: Index = field(default_factory=dict)
    edge: Index = field(default_factory=dict)
    active: Category = field(default_factory=Category.default)
    refreshing: bool = False
    status: StatusReport = field(default_factory=lambda: StatusReport(Status.IDLE))
    last_result: Optional[Entry] = None
    parse_reports: Dict[Category, ParseReport] = field(default_factory=dict)
    # Guards the refreshing flag and the result/status pair
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def index_for(self, category: Category) -> Index:
        return self.corner if category is Category.CORNER else self.edge

    @property
    def active_index(self) -> Index:
        return self.index_for(self.active)

    @property
    def has_data(self) -> bool:
        return bool(self.corner or self.edge)

    def adopt(self, corner: Index, edge: Index):
        """Replace both indices at once"""
        self.corner = corner
        self.edge = edge

    def set_status(self, status: Status,
                   last_updated: Optional[str] = None,
                   detail: Optional[str] = None) -> StatusReport:
        self.status = StatusReport(status, last_updated, detail)
        logger.debug(f"Status: {self.status.render()}")
        return self.status

    def switch_category(self) -> Category:
        """Flip the active category"""
        self.active = self.active.other()
        self.set_status(Status.SWITCHED, detail=f"to {self.active.value}")
        return self.active

    def select_category(self, category: Category) -> Category:
        if category is not self.active:
            self.active = category
            self.set_status(Status.SWITCHED, detail=f"to {self.active.value}")
        return self.active

    def clear(self):
        """Drop the displayed result"""
        self.last_result = None
        self.set_status(Status.CLEARED)
