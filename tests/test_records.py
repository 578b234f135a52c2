"""
Tests for the record fetcher — fetcher/records.py

Runs RecordFetcher against the FakeUpstream fixture from conftest.py.
"""
import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fetcher.client import QuickbaseClient
from fetcher.errors import UpstreamError
from fetcher.records import (
    ACTIVE_STATUS_FILTER,
    RecordFetcher,
    build_program_key,
    build_report_link,
    field_value,
)
from pipeline.models import Customer, Report
from tests.conftest import (
    CUSTOMERS_TABLE,
    PROGRAMS_TABLE,
    REPORT_BASE_URL,
    REPORTS_TABLE,
    customer_row,
    program_row,
)


@pytest.fixture()
def fetcher(fake_upstream, qb_config):
    client = QuickbaseClient(qb_config.api_url, session=fake_upstream.session,
                             timeout=qb_config.timeout_seconds)
    return RecordFetcher(client, qb_config)


class TestHelpers:
    def test_field_value(self):
        row = {"6": {"value": "Acme"}, "9": "bare"}
        assert field_value(row, 6) == "Acme"
        assert field_value(row, 9) is None
        assert field_value(row, 11) is None

    def test_program_key(self):
        assert build_program_key("Acme", 2023) == "Acme 2023"
        assert build_program_key("Acme", 2023.0) == "Acme 2023"
        assert build_program_key("Acme", "FY23") == "Acme FY23"

    def test_program_key_missing_parts(self):
        assert build_program_key(None, 2023) == " 2023"
        assert build_program_key("Acme", None) == "Acme "

    def test_report_link(self):
        assert build_report_link("https://q/db/", "tblR", "10") == "https://q/db/tblR?a=q&qid=10"

    def test_active_filter(self):
        assert ACTIVE_STATUS_FILTER.format(status=17) == "{17.CT.'Active'}OR{17.CT.'Active*'}"


class TestFetchReports:
    def test_normalizes_reports(self, fetcher):
        reports = fetcher.fetch_reports()
        assert reports[0] == Report(
            name="Acme 2023", id="10",
            link=f"{REPORT_BASE_URL}{REPORTS_TABLE}?a=q&qid=10",
        )
        assert [r.name for r in reports] == ["Acme 2023", "Bolt 2024"]

    def test_requests_reports_table(self, fetcher, fake_upstream):
        fetcher.fetch_reports()
        method, url, kw = fake_upstream.calls[0]
        assert method == "GET"
        assert kw["params"] == {"tableId": REPORTS_TABLE}
        assert kw["timeout"] == 5.0

    def test_duplicates_kept_by_default(self, fetcher, fake_upstream):
        fake_upstream.reports.append({"id": 10, "name": "Acme 2023"})
        assert len(fetcher.fetch_reports()) == 3

    def test_dedupe(self, fetcher, fake_upstream):
        fake_upstream.reports.append({"id": 10, "name": "Acme 2023"})
        fetcher.dedupe = True
        assert len(fetcher.fetch_reports()) == 2


class TestFetchActivePrograms:
    def test_query_body(self, fetcher, fake_upstream):
        fetcher.fetch_active_programs()
        _, _, kw = fake_upstream.calls[0]
        assert kw["json"] == {
            "from": PROGRAMS_TABLE,
            "select": [3, 6, 11, 17, 111],
            "where": "{17.CT.'Active'}OR{17.CT.'Active*'}",
            "sortBy": [{"fieldId": 3, "order": "ASC"}],
        }

    def test_derives_program_keys(self, fetcher):
        programs = fetcher.fetch_active_programs()
        assert [(p.customer_code, p.program_key) for p in programs] == [
            ("C1", "Acme 2023"),
            ("C2", "Bolt 2024"),
            ("C1", "Acme 2024"),
            ("C9", "Zed 2022"),
            ("C404", "Orphan 2023"),
        ]
        assert all(p.report_link is None for p in programs)

    def test_custom_field_ids(self, fetcher, fake_upstream, qb_config):
        qb_config.program_fields = dict(qb_config.program_fields, year=112)
        fake_upstream.programs = [
            {**program_row(1, "Acme", "C1", 2020), "112": {"value": 2025}}
        ]
        programs = fetcher.fetch_active_programs()
        assert programs[0].program_key == "Acme 2025"

    def test_dedupe_programs(self, fetcher, fake_upstream):
        fake_upstream.programs = [program_row(1, "Acme", "C1", 2023),
                                  program_row(2, "Acme", "C1", 2023)]
        assert len(fetcher.fetch_active_programs()) == 2
        fetcher.dedupe = True
        assert len(fetcher.fetch_active_programs()) == 1


class TestFetchCustomers:
    def test_normalizes_customers(self, fetcher, fake_upstream):
        customers = fetcher.fetch_customers()
        assert customers[1] == Customer(name="Acme Inc", code="C1")
        _, _, kw = fake_upstream.calls[0]
        assert kw["json"] == {"from": CUSTOMERS_TABLE, "select": [6, 9]}

    def test_numeric_code_as_text(self, fetcher, fake_upstream):
        fake_upstream.customers = [customer_row("Acme", 42)]
        assert fetcher.fetch_customers() == [Customer(name="Acme", code="42")]

    def test_missing_fields_are_none(self, fetcher, fake_upstream):
        fake_upstream.customers = [{"6": {"value": "Acme"}}]
        assert fetcher.fetch_customers() == [Customer(name="Acme", code=None)]


class TestFetchAll:
    def test_sequential(self, fetcher):
        records = fetcher.fetch_all()
        assert len(records.reports) == 2
        assert len(records.programs) == 5
        assert len(records.customers) == 4

    def test_concurrent_matches_sequential(self, fetcher):
        assert fetcher.fetch_all(concurrent=True) == fetcher.fetch_all()

    @pytest.mark.parametrize("concurrent", [False, True])
    def test_upstream_failure_propagates(self, fetcher, fake_upstream, concurrent):
        fake_upstream.fail = requests.ConnectionError("down")
        with pytest.raises(UpstreamError):
            fetcher.fetch_all(concurrent=concurrent)

    def test_non_object_report_raises_upstream_error(self, fetcher, fake_upstream):
        fake_upstream.reports = ["not-a-report-object"]
        with pytest.raises(UpstreamError):
            fetcher.fetch_reports()

    def test_non_object_customer_row_raises_upstream_error(self, fetcher, fake_upstream):
        fake_upstream.customers = [["Acme", "C1"]]
        with pytest.raises(UpstreamError):
            fetcher.fetch_customers()

    def test_http_failure_propagates(self, fetcher, fake_upstream):
        fake_upstream.fail = 503
        with pytest.raises(UpstreamError) as excinfo:
            fetcher.fetch_reports()
        assert excinfo.value.status_code == 503
