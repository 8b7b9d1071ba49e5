"""
Sheet export client - fetches the raw tab-separated letter-pair sheets
"""

import logging
import os
import time
from typing import Dict, Optional

import requests
from dotenv import load_dotenv
from ratelimit import limits, sleep_and_retry

from utils.logging_config import log_api_request

from .models import Category

# Load environment variables
load_dotenv('config.env')

logger = logging.getLogger(__name__)

DEFAULT_SHEET_URLS = {
    Category.CORNER: "https://commexportproxy.vercel.app/api/algs?sheet=corners_with_notes",
    Category.EDGE: "https://commexportproxy.vercel.app/api/algs?sheet=edges_with_notes",
}

SHEET_URL_ENV = {
    Category.CORNER: 'CORNER_SHEET_URL',
    Category.EDGE: 'EDGE_SHEET_URL',
}

# Client-side throttle; calls beyond the window block until it frees up
REQUESTS_PER_MINUTE = 60


class SheetFetchError(Exception):
    """Raised when a sheet could not be retrieved"""
    pass


class TransientError(SheetFetchError):
    """Network failures and 5xx responses"""
    pass


class PermanentError(SheetFetchError):
    """4xx responses and anything else that will not fix itself"""
    pass


class SheetClient:
    """
    Client for the sheet export proxy

    One GET per category, no authentication, no pagination. Failed requests
    are never retried here; retrying is always a user decision.
    """

    def __init__(self,
                 urls: Optional[Dict[Category, str]] = None,
                 timeout: Optional[float] = None):
        """
        Initialize the sheet client

        Args:
            urls: Per-category sheet URLs (or set CORNER_SHEET_URL / EDGE_SHEET_URL)
            timeout: Request timeout in seconds (or set REQUEST_TIMEOUT, default 15)
        """
        self.urls = {
            category: os.getenv(SHEET_URL_ENV[category], DEFAULT_SHEET_URLS[category])
            for category in Category
        }
        if urls:
            self.urls.update(urls)

        self.timeout = timeout if timeout is not None else float(os.getenv('REQUEST_TIMEOUT', '15'))

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'letterpair-lookup/1.0',
            'Accept': 'text/tab-separated-values, text/plain, */*'
        })

        logger.debug(f"Initialized sheet client with timeout {self.timeout}s")

    @sleep_and_retry
    @limits(calls=REQUESTS_PER_MINUTE, period=60)
    def _get(self, url: str) -> requests.Response:
        return self.session.get(url, timeout=self.timeout)

    def fetch_sheet(self, category: Category) -> str:
        """
        Download the raw text of one sheet

        Args:
            category: Which sheet to fetch

        Returns:
            Response body as text

        Raises:
            TransientError: Timeouts, connection problems and 5xx responses
            PermanentError: 4xx and other non-success responses
        """
        url = self.urls[category]
        start_time = time.time()

        try:
            response = self._get(url)
        except requests.exceptions.Timeout:
            log_api_request(logger, 'GET', url, 0, time.time() - start_time, error="Request timeout")
            raise TransientError(f"Timed out fetching {category.value} sheet")
        except requests.exceptions.ConnectionError:
            log_api_request(logger, 'GET', url, 0, time.time() - start_time, error="Connection error")
            raise TransientError(f"Connection error fetching {category.value} sheet")
        except requests.exceptions.RequestException as e:
            log_api_request(logger, 'GET', url, 0, time.time() - start_time, error=f"Network error: {e}")
            raise TransientError(f"Network error fetching {category.value} sheet: {e}")

        response_time = time.time() - start_time

        if not response.ok:
            log_api_request(logger, 'GET', url, response.status_code, response_time,
                            error=response.reason)
            if response.status_code >= 500:
                raise TransientError(f"{category.value} sheet returned {response.status_code}")
            raise PermanentError(f"{category.value} sheet returned {response.status_code}")

        text = response.text
        log_api_request(logger, 'GET', url, response.status_code, response_time,
                        byte_count=len(response.content))
        return text

    def close(self):
        self.session.close()
