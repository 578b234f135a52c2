"""
HTTP client for the upstream record API.

Wraps the two calls the navigator needs:

  GET  {api_url}/reports?tableId=<table>   → list of report definitions
  POST {api_url}/records/query             → {"data": [...], "fields": [...]}

Authorization headers are passed in by the caller and attached to the pooled
session; the client never reads credentials itself.  Every request carries
a bounded timeout.  Failures of any kind raise ``UpstreamError`` and are not
retried.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from fetcher.errors import UpstreamError
from utils.http import SessionManager

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.quickbase.com/v1"
DEFAULT_TIMEOUT = 30.0


def _require_objects(items: list, what: str, url: str) -> None:
    """Raise UpstreamError unless every element of *items* is a JSON object."""
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise UpstreamError(
                f"{what} has a non-object entry at index {i} "
                f"({type(item).__name__})",
                url=url,
            )


class QuickbaseClient:
    """Thin JSON client over a pooled ``requests`` session.

    Args:
        api_url: API root, e.g. ``https://api.quickbase.com/v1``.
        headers: Request headers (realm, authorization); opaque here.
        timeout: Seconds to wait for connect and for each read.
        session: Pre-built session (tests pass a mock); when omitted a
            pooled session without retries is created and owned here.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._manager: SessionManager | None = None
        if session is None:
            self._manager = SessionManager(headers=headers)
            session = self._manager.session
        elif headers:
            session.headers.update(headers)
        self.session = session

    def close(self) -> None:
        if self._manager is not None:
            self._manager.close()

    def __enter__(self) -> "QuickbaseClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── Requests ──────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.api_url}/{path.lstrip('/')}"
        start = time.monotonic()
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.Timeout as exc:
            raise UpstreamError(
                f"{method} {url} timed out after {self.timeout}s", url=url
            ) from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise UpstreamError(
                f"{method} {url} returned HTTP {status}", url=url, status_code=status
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"{method} {url} failed: {exc}", url=url) from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamError(
                f"{method} {url} returned a non-JSON body", url=url,
                status_code=resp.status_code,
            ) from exc

        logger.debug("%s %s -> %s in %.0fms", method, url, resp.status_code,
                     (time.monotonic() - start) * 1000)
        return payload

    def get_reports(self, table_id: str) -> list[dict[str, Any]]:
        """Return the raw report definitions for *table_id*."""
        payload = self._request("GET", "reports", params={"tableId": table_id})
        if not isinstance(payload, list):
            raise UpstreamError(
                f"Expected a list of reports for table {table_id!r}, "
                f"got {type(payload).__name__}",
                url=f"{self.api_url}/reports",
            )
        _require_objects(payload, f"Report list for table {table_id!r}",
                         f"{self.api_url}/reports")
        return payload

    def query_records(
        self,
        table_id: str,
        select: list[int],
        where: str | None = None,
        sort_by: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a record query and return its ``data`` rows.

        Each row maps field id (as a string) to ``{"value": ...}``.
        """
        body: dict[str, Any] = {"from": table_id, "select": list(select)}
        if where:
            body["where"] = where
        if sort_by:
            body["sortBy"] = sort_by

        payload = self._request("POST", "records/query", json=body)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise UpstreamError(
                f"Record query on table {table_id!r} returned no 'data' list",
                url=f"{self.api_url}/records/query",
            )
        _require_objects(data, f"Record query on table {table_id!r}",
                         f"{self.api_url}/records/query")
        return data
