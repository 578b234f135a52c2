"""
Upstream record fetcher package.

Reads reports, active programs and customers from the low-code database's
REST API and normalizes them into ``pipeline.models`` records::

    from fetcher import QuickbaseClient, RecordFetcher

    with QuickbaseClient(cfg.api_url, headers=cfg.headers()) as client:
        records = RecordFetcher(client, cfg).fetch_all()
"""

from fetcher.errors import UpstreamError
from fetcher.client import QuickbaseClient
from fetcher.records import (
    ACTIVE_STATUS_FILTER,
    RecordFetcher,
    build_program_key,
    build_report_link,
    field_value,
)

__all__ = [
    "UpstreamError",
    "QuickbaseClient",
    "ACTIVE_STATUS_FILTER",
    "RecordFetcher",
    "build_program_key",
    "build_report_link",
    "field_value",
]
