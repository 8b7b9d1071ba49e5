"""
Sheet acquisition: initial load from the offline cache, refresh from the
remote sheets with fallback to the cache
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Dict

from api.client import SheetClient, SheetFetchError
from api.models import Category, Status, StatusReport
from api.parser import parse_tsv_with_report
from storage.cache import SnapshotCache
from utils.logging_config import get_contextual_logger, log_parse_summary

from .session import LookupSession

logger = logging.getLogger(__name__)


def fetch_both(client: SheetClient) -> Dict[Category, str]:
    """
    Fetch every category concurrently and join the results

    Both requests always run to completion; if either failed the pair as a
    whole fails.

    Args:
        client: Object with a ``fetch_sheet(category)`` method

    Returns:
        Raw sheet text per category

    Raises:
        SheetFetchError: If any request failed
    """
    with ThreadPoolExecutor(max_workers=len(Category), thread_name_prefix='sheet-fetch') as executor:
        futures = {category: executor.submit(client.fetch_sheet, category) for category in Category}
        wait(futures.values())

    texts = {}
    failures = []
    for category, future in futures.items():
        error = future.exception()
        if error is None:
            texts[category] = future.result()
        elif isinstance(error, SheetFetchError):
            failures.append(f"{category.value}: {error}")
        else:
            raise error

    if failures:
        raise SheetFetchError("; ".join(failures))

    return texts


class AcquisitionController:
    """
    Loads sheet indices into a session

    Every path ends in a status classification on the session; network
    failures never reach the caller and nothing is retried automatically.
    """

    def __init__(self,
                 session: LookupSession,
                 client: SheetClient,
                 cache: SnapshotCache):
        self.session = session
        self.client = client
        self.cache = cache

    def initial_load(self) -> StatusReport:
        """
        Start-up protocol: use the cached snapshot if there is one,
        otherwise refresh from the network
        """
        snapshot = self.cache.load()

        if snapshot is not None:
            self.session.adopt(snapshot.corner, snapshot.edge)
            return self.session.set_status(Status.LOADED_FROM_CACHE, snapshot.captured_at_text)

        self.session.set_status(Status.NO_CACHE_FETCHING)
        logger.info("No cached sheets, fetching")
        return self.refresh()

    def refresh(self) -> StatusReport:
        """
        Fetch both sheets, parse and persist them

        Falls back to the cached snapshot when either fetch fails. A refresh
        requested while another is running on the same session is ignored.
        """
        with self.session.lock:
            if self.session.refreshing:
                logger.warning("Refresh already in progress, ignoring request")
                return self.session.status

            self.session.refreshing = True
            self.session.set_status(Status.UPDATING)

        try:
            try:
                texts = fetch_both(self.client)
            except SheetFetchError as e:
                logger.warning(f"Fetch failed: {e}")
                return self._fall_back_to_cache()

            indices = {}
            for category, text in texts.items():
                index, report = parse_tsv_with_report(text)
                indices[category] = index
                self.session.parse_reports[category] = report
                log_parse_summary(
                    get_contextual_logger(__name__, category=category.value),
                    category.value, report.accepted, report.discarded, report.keys
                )

            corner, edge = indices[Category.CORNER], indices[Category.EDGE]
            self.session.adopt(corner, edge)

            # Only a snapshot written by this refresh may supply the timestamp
            snapshot = self.cache.load() if self.cache.save(corner, edge) else None

            if snapshot is None:
                logger.warning("Sheets updated but the snapshot could not be persisted")
                return self.session.set_status(Status.UPDATED)

            return self.session.set_status(Status.UPDATED, snapshot.captured_at_text)

        finally:
            self.session.refreshing = False

    def _fall_back_to_cache(self) -> StatusReport:
        snapshot = self.cache.load()

        if snapshot is None:
            logger.error("No sheets available: fetch failed and nothing is cached")
            return self.session.set_status(Status.NO_DATA)

        self.session.adopt(snapshot.corner, snapshot.edge)
        return self.session.set_status(Status.OFFLINE_USING_CACHE, snapshot.captured_at_text)
