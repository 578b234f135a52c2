"""
Record fetcher — the three reads behind one navigation page.

  fetch_reports()          reports defined on the jobs table
  fetch_active_programs()  programs whose status contains "Active"
  fetch_customers()        every customer's name and code

Each read normalizes raw API rows into the flat dataclasses in
``pipeline.models``.  A field missing from a row becomes None (or an empty
string inside a derived name); it is never an error.  Duplicate rows are kept
unless ``dedupe`` is set.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from fetcher.client import QuickbaseClient
from pipeline.models import Customer, FetchedRecords, Program, Report
from pipeline.reconcile import unique_by_key
from utils.config import QuickbaseConfig

logger = logging.getLogger(__name__)

# Status filter: "Active" and "Active*" (e.g. "Active - Renewal").
ACTIVE_STATUS_FILTER = "{{{status}.CT.'Active'}}OR{{{status}.CT.'Active*'}}"


def field_value(row: dict[str, Any], field_id: int) -> Any:
    """Return ``row[str(field_id)]["value"]``, or None if absent."""
    cell = row.get(str(field_id))
    if isinstance(cell, dict):
        return cell.get("value")
    return None


def _text(value: Any) -> str | None:
    """Render an API value as text; whole-number floats lose their ``.0``."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_report_link(base_url: str, table_id: str, report_id: str | None) -> str:
    """Hyperlink to a report: ``<base><table id>?a=q&qid=<report id>``."""
    return f"{base_url}{table_id}?a=q&qid={report_id if report_id is not None else ''}"


def build_program_key(name: Any, year: Any) -> str:
    """Return ``"<program name> <year>"``, the name its report must carry."""
    return f"{_text(name) or ''} {_text(year) or ''}"


class RecordFetcher:
    """Reads and normalizes the Reports, Programs and Customers record sets.

    Args:
        client: Upstream API client (owns headers, timeout and session).
        config: Table ids, field ids and the report link base URL.
        dedupe: Remove structurally identical records after each fetch.
    """

    def __init__(self, client: QuickbaseClient, config: QuickbaseConfig,
                 dedupe: bool = False) -> None:
        self.client = client
        self.config = config
        self.dedupe = dedupe

    def _maybe_dedupe(self, records: list, label: str) -> list:
        if not self.dedupe:
            return records
        unique = unique_by_key(records)
        if len(unique) != len(records):
            logger.info("Dropped %d duplicate %s record(s)",
                        len(records) - len(unique), label)
        return unique

    def fetch_reports(self) -> list[Report]:
        table_id = self.config.reports_table_id
        raw = self.client.get_reports(table_id)
        reports = []
        for item in raw:
            report_id = _text(item.get("id"))
            reports.append(Report(
                name=_text(item.get("name")),
                id=report_id,
                link=build_report_link(self.config.report_base_url, table_id, report_id),
            ))
        logger.info("Fetched %d report(s) from table %s", len(reports), table_id)
        return self._maybe_dedupe(reports, "report")

    def fetch_active_programs(self) -> list[Program]:
        fields = self.config.program_fields
        rows = self.client.query_records(
            self.config.programs_table_id,
            select=[fields["record_id"], fields["name"], fields["customer_code"],
                    fields["status"], fields["year"]],
            where=ACTIVE_STATUS_FILTER.format(status=fields["status"]),
            sort_by=[{"fieldId": fields["record_id"], "order": "ASC"}],
        )
        programs = [
            Program(
                customer_code=_text(field_value(row, fields["customer_code"])),
                program_key=build_program_key(field_value(row, fields["name"]),
                                              field_value(row, fields["year"])),
            )
            for row in rows
        ]
        logger.info("Fetched %d active program(s)", len(programs))
        return self._maybe_dedupe(programs, "program")

    def fetch_customers(self) -> list[Customer]:
        fields = self.config.customer_fields
        rows = self.client.query_records(
            self.config.customers_table_id,
            select=[fields["name"], fields["code"]],
        )
        customers = [
            Customer(
                name=_text(field_value(row, fields["name"])),
                code=_text(field_value(row, fields["code"])),
            )
            for row in rows
        ]
        logger.info("Fetched %d customer(s)", len(customers))
        return self._maybe_dedupe(customers, "customer")

    def fetch_all(self, concurrent: bool = False) -> FetchedRecords:
        """Run the three reads, optionally in parallel.

        The reads share no state, so the result is the same either way.  The
        first ``UpstreamError`` raised propagates.
        """
        if not concurrent:
            return FetchedRecords(
                reports=self.fetch_reports(),
                programs=self.fetch_active_programs(),
                customers=self.fetch_customers(),
            )

        with ThreadPoolExecutor(max_workers=3) as pool:
            reports = pool.submit(self.fetch_reports)
            programs = pool.submit(self.fetch_active_programs)
            customers = pool.submit(self.fetch_customers)
            return FetchedRecords(
                reports=reports.result(),
                programs=programs.result(),
                customers=customers.result(),
            )
