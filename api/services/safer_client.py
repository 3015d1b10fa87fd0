"""
FMCSA SAFER client for fetching Company Snapshot pages.

One GET per lookup, bounded by an explicit timeout and never retried. The
whole page is buffered before it is handed to the extractors.
"""

import logging
from typing import Optional

import requests

from config import settings

logger = logging.getLogger(__name__)

QUERY_BY_DOT = "USDOT"
QUERY_BY_MC = "MC_MX"


class SaferUnavailableError(Exception):
    """Raised when the SAFER page could not be fetched.

    Distinct from a "no such carrier" answer: the carrier may well exist,
    we just could not ask.
    """

    def __init__(self, message: str, timed_out: bool = False, status_code: Optional[int] = None):
        super().__init__(message)
        self.timed_out = timed_out
        self.status_code = status_code


class SaferClient:
    """Client for the public SAFER Company Snapshot query page."""

    def __init__(self, base_url: Optional[str] = None, user_agent: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the SAFER client.

        Args:
            base_url: Query endpoint. Defaults to settings.safer_base_url
            user_agent: User-Agent header. Defaults to settings.safer_user_agent
            session: Optional pre-built session, mainly for tests
        """
        self.base_url = base_url or settings.safer_base_url
        self.headers = {
            "User-Agent": user_agent or settings.safer_user_agent,
            "Accept": "text/html",
        }
        self.session = session or requests.Session()

    @staticmethod
    def snapshot_params(query_param: str, query_string: str) -> dict:
        """Query-string parameters for a snapshot lookup.

        Args:
            query_param: QUERY_BY_DOT or QUERY_BY_MC
            query_string: The bare number to look up
        """
        return {
            "searchtype": "ANY",
            "query_type": "queryCarrierSnapshot",
            "query_param": query_param,
            "query_string": query_string,
        }

    def fetch_snapshot(self, query_param: str, query_string: str,
                       timeout: Optional[float] = None) -> str:
        """Fetch the Company Snapshot page for one carrier.

        Args:
            query_param: QUERY_BY_DOT or QUERY_BY_MC
            query_string: The bare number to look up
            timeout: Seconds before the request is abandoned.
                Defaults to settings.safer_timeout_seconds

        Returns:
            str: Full HTML of the response

        Raises:
            SaferUnavailableError: On timeout, connection failure or non-2xx status
        """
        timeout = timeout or settings.safer_timeout_seconds
        params = self.snapshot_params(query_param, query_string)
        logger.info(f"Fetching SAFER snapshot for {query_param} {query_string}")

        try:
            response = self.session.get(self.base_url, params=params,
                                        headers=self.headers, timeout=timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(f"SAFER timed out after {timeout}s for {query_param} {query_string}: {e}")
            raise SaferUnavailableError("SAFER lookup timed out", timed_out=True) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"SAFER request failed for {query_param} {query_string}: {e}")
            raise SaferUnavailableError("SAFER lookup failed") from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"SAFER returned status {response.status_code} for {query_param} {query_string}")
            raise SaferUnavailableError("SAFER lookup failed", status_code=response.status_code)

        return response.text
