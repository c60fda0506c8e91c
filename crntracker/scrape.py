from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from crntracker.errors import NetworkError


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

DETAIL_URL = "https://oscar.gatech.edu/bprod/bwckschd.p_disp_detail_sched"

HEADERS = {
    "User-Agent": "crntracker (+https://github.com/crntracker/crntracker)",
}


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


class DocumentFetcher:
    """
    Fetch the public course detail page for one CRN.

    One GET per call, with a bounded number of retries and exponential
    backoff for transient failures. Use as a context manager to close the
    underlying session.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        retries: int = 2,
        backoff: float = 1.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout
        self.retries = max(0, retries)
        self.backoff = backoff
        self._sleep = sleep
        self._session = session or requests.Session()
        self._session.headers.update(HEADERS)

    def __enter__(self) -> "DocumentFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def fetch(self, term: str, crn: str) -> str:
        """
        Return the raw HTML for (term, crn), retrying on NetworkError.
        """
        attempt = 0
        while True:
            try:
                return self._fetch_once(term, crn)
            except NetworkError as e:
                if attempt >= self.retries:
                    raise
                wait = self.backoff * (2 ** attempt)
                attempt += 1
                logger.warning("%s (retry %d/%d in %.1fs)", e, attempt, self.retries, wait)
                self._sleep(wait)

    def _fetch_once(self, term: str, crn: str) -> str:
        params = {"term_in": term, "crn_in": crn}
        logger.debug("GET %s %s", DETAIL_URL, params)
        try:
            resp = self._session.get(DETAIL_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            text = resp.text
        except requests.RequestException as e:
            raise NetworkError(str(e), crn=crn, stage="fetch") from e
        # undecodable bytes come back as U+FFFD
        return text
