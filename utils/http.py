"""HTTP utilities for the climate actions tools.

Provides reusable pieces for:
- Retry policy configuration (disabled by default: one attempt per request)
- Session management with connection pooling
- JSON GET/POST helpers with a mandatory timeout
"""

from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry


class RetryStrategy:
    """Defines retry behavior for HTTP requests.

    The default is no retries: a failed load is reported to the caller, and
    retrying is left to an explicit user action.
    """

    def __init__(self, max_retries: int = 0, backoff_factor: float = 0.5,
                 status_forcelist: Optional[List[int]] = None):
        """Initialize retry strategy.

        Args:
            max_retries: Maximum number of retry attempts (default: 0)
            backoff_factor: Exponential backoff multiplier (default: 0.5)
            status_forcelist: HTTP status codes to retry on
                            (default: [429, 500, 502, 503, 504])
        """
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist or [429, 500, 502, 503, 504]

    def get_retry_object(self) -> URLRetry:
        """Get urllib3 Retry object configured with this strategy.

        ``raise_on_status`` is off so the final response reaches
        ``raise_for_status()`` instead of surfacing as a MaxRetryError.
        """
        return URLRetry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False,
        )


class SessionManager:
    """Manages HTTP sessions with connection pooling and retries."""

    def __init__(self, retry_strategy: Optional[RetryStrategy] = None,
                 pool_connections: int = 4, pool_maxsize: int = 8):
        """Initialize session manager.

        Args:
            retry_strategy: RetryStrategy to use (default: no retries)
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.retry_strategy = retry_strategy or RetryStrategy()
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=self.retry_strategy.get_retry_object(),
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
            self._session.headers["Accept"] = "application/json"
        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def get_json(session: requests.Session, url: str, timeout: float,
             params: Optional[dict] = None) -> Any:
    """GET *url* and decode the JSON body.

    Raises:
        requests.RequestException: Transport failure or non-2xx status.
        ValueError: The body is not valid JSON.
    """
    resp = session.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def post_json(session: requests.Session, url: str, payload: dict,
              timeout: float) -> Any:
    """POST *payload* as JSON to *url* and decode the JSON response.

    Raises:
        requests.RequestException: Transport failure or non-2xx status.
        ValueError: The body is not valid JSON.
    """
    resp = session.post(url, json=payload, timeout=timeout)
    resp.raise_for_status()
    return resp.json()
