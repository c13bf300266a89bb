"""HTTP utilities for the GDP chart tools.

Provides reusable pieces for:
- Retry configuration (urllib3 ``Retry`` mounted on a requests adapter)
- Session management with connection pooling
- Fetching and decoding a JSON document
"""

from typing import Optional, List, Any
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry


class RetryStrategy:
    """Defines retry behavior for HTTP requests."""

    def __init__(self, max_retries: int = 0, backoff_factor: float = 2.0,
                 status_forcelist: Optional[List[int]] = None):
        """Initialize retry strategy.

        Args:
            max_retries: Maximum number of retry attempts (default: 0, the
                         document is requested exactly once)
            backoff_factor: Exponential backoff multiplier (default: 2.0)
            status_forcelist: HTTP status codes to retry on
                            (default: [429, 500, 502, 503, 504])
        """
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist or [429, 500, 502, 503, 504]

    def get_retry_object(self) -> URLRetry:
        """Get urllib3 Retry object configured with this strategy.

        ``raise_on_status`` is disabled so that an exhausted retry budget
        hands the last response back to ``raise_for_status``.
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
                 pool_connections: int = 1, pool_maxsize: int = 2):
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
        """Get or create HTTP session with retries and pooling."""
        if self._session is None:
            self._session = requests.Session()

            retry = self.retry_strategy.get_retry_object()

            adapter = HTTPAdapter(
                max_retries=retry,
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

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


def fetch_json(url: str, session: Optional[requests.Session] = None,
               timeout: Optional[float] = None) -> Any:
    """GET *url* and return the decoded JSON body.

    Args:
        url: Document URL
        session: Optional requests.Session (default: a throwaway session)
        timeout: Request timeout in seconds, or None to wait indefinitely

    Returns:
        The decoded JSON value

    Raises:
        requests.RequestException: Connection failures and non-2xx statuses
        ValueError: Body is not valid JSON
    """
    if session is None:
        with requests.Session() as own_session:
            return fetch_json(url, session=own_session, timeout=timeout)

    resp = session.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.json()
