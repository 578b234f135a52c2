"""HTTP utilities for the program report navigator.

Provides a pooled ``requests`` session with retries disabled: a failed
upstream call surfaces immediately instead of being retried.
"""

from typing import Dict, Optional
import requests
from requests.adapters import HTTPAdapter


class SessionManager:
    """Manages an HTTP session with connection pooling and default headers."""

    def __init__(self, headers: Optional[Dict[str, str]] = None,
                 pool_connections: int = 4, pool_maxsize: int = 4):
        """Initialize session manager.

        Args:
            headers: Headers sent with every request (e.g. authorization)
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.headers = dict(headers or {})
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session.

        Returns:
            requests.Session object
        """
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.headers)

            adapter = HTTPAdapter(
                max_retries=0,
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
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
