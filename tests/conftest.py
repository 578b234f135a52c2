"""
Pytest fixtures for the program report navigator tests.

Provides an in-memory stand-in for the upstream record API (``FakeUpstream``)
exposed through a MagicMock ``requests`` session, a matching
``QuickbaseConfig``, and small record builders.  No test touches the network.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config import NavConfig, QuickbaseConfig  # noqa: E402

API_URL = "https://api.example.test/v1"
REPORT_BASE_URL = "https://example.quickbase.test/db/"
REPORTS_TABLE = "tblReports"
PROGRAMS_TABLE = "tblPrograms"
CUSTOMERS_TABLE = "tblCustomers"


# ── Helpers ───────────────────────────────────────────────────────────────────

def make_response(payload, status: int = 200) -> MagicMock:
    """Build a MagicMock shaped like a requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status} Error", response=resp
        )
    return resp


def program_row(record_id, name, code, year, status="Active") -> dict:
    """A Programs table row keyed by the default field ids."""
    return {
        "3": {"value": record_id},
        "6": {"value": name},
        "11": {"value": code},
        "17": {"value": status},
        "111": {"value": year},
    }


def customer_row(name, code) -> dict:
    return {"6": {"value": name}, "9": {"value": code}}


class FakeUpstream:
    """In-memory record API answering the two calls the client makes.

    ``reports`` is the raw list returned by GET /reports; ``programs`` and
    ``customers`` are raw table rows.  The programs query applies the same
    "status contains Active" filter and record-id sort the real API would.
    Set ``fail`` to a status code or exception to make every call fail.
    """

    def __init__(self):
        self.reports: list[dict] = []
        self.programs: list[dict] = []
        self.customers: list[dict] = []
        self.fail = None
        self.calls: list[tuple[str, str, dict]] = []
        self.session = MagicMock()
        self.session.headers = {}
        self.session.request.side_effect = self._dispatch

    def _dispatch(self, method, url, timeout=None, params=None, json=None, **kwargs):
        self.calls.append((method, url, {"params": params, "json": json,
                                         "timeout": timeout}))
        if isinstance(self.fail, Exception):
            raise self.fail
        if isinstance(self.fail, int):
            return make_response({"message": "error"}, status=self.fail)

        if method == "GET" and url.endswith("/reports"):
            return make_response(list(self.reports))
        if method == "POST" and url.endswith("/records/query"):
            table = json["from"]
            if table == PROGRAMS_TABLE:
                rows = [r for r in self.programs
                        if "Active" in str(r.get("17", {}).get("value", ""))]
                rows.sort(key=lambda r: r["3"]["value"])
                return make_response({"data": rows, "fields": [], "metadata": {}})
            if table == CUSTOMERS_TABLE:
                return make_response({"data": list(self.customers), "fields": [],
                                      "metadata": {}})
        return make_response({"message": "not found"}, status=404)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def qb_config() -> QuickbaseConfig:
    cfg = QuickbaseConfig()
    cfg.api_url = API_URL
    cfg.realm = "example.quickbase.test"
    cfg._user_token = "token-123"
    cfg.reports_table_id = REPORTS_TABLE
    cfg.programs_table_id = PROGRAMS_TABLE
    cfg.customers_table_id = CUSTOMERS_TABLE
    cfg.report_base_url = REPORT_BASE_URL
    cfg.timeout_seconds = 5.0
    return cfg


@pytest.fixture()
def nav_config() -> NavConfig:
    cfg = NavConfig()
    cfg.mask_names = False
    cfg.dedupe_records = False
    cfg.fetch_concurrently = False
    return cfg


@pytest.fixture()
def fake_upstream() -> FakeUpstream:
    """Upstream with four customers, five active programs and two reports.

    Acme 2023 and Bolt 2024 have reports; Acme 2024, Zed 2022 and Orphan 2023
    do not.  Orphan 2023 points at an unknown customer code, Quiet Co has no
    active program, and "Retired 2019" is filtered out by status.
    """
    fake = FakeUpstream()
    fake.reports = [
        {"id": 10, "name": "Acme 2023", "type": "table"},
        {"id": 11, "name": "Bolt 2024", "type": "table"},
    ]
    fake.programs = [
        program_row(1, "Acme", "C1", 2023),
        program_row(2, "Bolt", "C2", 2024, status="Active*"),
        program_row(3, "Acme", "C1", 2024),
        program_row(4, "Zed", "C9", 2022),
        program_row(5, "Retired", "C1", 2019, status="Closed"),
        program_row(6, "Orphan", "C404", 2023),
    ]
    fake.customers = [
        customer_row("Bolt Works", "C2"),
        customer_row("Acme Inc", "C1"),
        customer_row("Quiet Co", "C3"),
        customer_row("Zed Labs", "C9"),
    ]
    return fake
