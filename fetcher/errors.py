"""Exceptions raised by the upstream record fetcher."""

from __future__ import annotations


class UpstreamError(Exception):
    """The record API could not be reached or returned an unusable response.

    Covers connection failures, timeouts, non-2xx statuses and bodies that are
    not the JSON shape the fetcher expects.  Never retried; it aborts the run.
    """

    def __init__(self, message: str, url: str | None = None,
                 status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def to_dict(self) -> dict:
        d: dict = {"error": "Upstream API failure", "detail": str(self)}
        if self.url:
            d["url"] = self.url
        if self.status_code is not None:
            d["upstream_status"] = self.status_code
        return d
