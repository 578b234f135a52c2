"""
Report/program reconciliation.

Joins the three fetched record sets:

  Programs ↔ Customers   by customer code
  Programs ↔ Reports     by name: a program's report must be named exactly
                         ``"<program name> <year>"`` (its ``program_key``)

and counts programs whose expected report does not exist yet.

Matching is exact string equality: case, spacing and punctuation all
matter.  A program whose customer code matches no customer is dropped from
the summaries without error; it still counts toward ``unmatched_count`` when
its report is missing.

Usage::

    from pipeline.reconcile import reconcile

    result = reconcile(reports, programs, customers)
    result.summaries        # list[CustomerSummary], customer order
    result.unmatched_count  # programs with no report of the expected name
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Container, Hashable, Iterable
from typing import TypeVar

from pipeline.models import (
    Customer,
    CustomerSummary,
    Program,
    ProgramLink,
    ReconcileResult,
    Report,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_report_lookup(reports: Iterable[Report]) -> dict[str | None, str]:
    """Map report name -> report link.  When names repeat, the last report wins."""
    lookup: dict[str | None, str] = {}
    for report in reports:
        lookup[report.name] = report.link
    return lookup


def find_unmatched_programs(
    report_names: Container[str | None],
    programs: Iterable[Program],
) -> list[Program]:
    """Return programs whose ``program_key`` is not in *report_names*, in input order.

    *report_names* is usually the lookup from ``build_report_lookup``.
    """
    return [p for p in programs if p.program_key not in report_names]


def unique_by_key(
    records: Iterable[T],
    key: Callable[[T], Hashable] | None = None,
) -> list[T]:
    """Drop structurally repeated records, keeping the first of each.

    Args:
        records: Dataclass records (or anything ``key`` accepts).
        key: Composite key function; defaults to all field values in order.

    Returns:
        Records in input order with later duplicates removed.
    """
    if key is None:
        key = dataclasses.astuple
    seen: set[Hashable] = set()
    unique: list[T] = []
    for record in records:
        k = key(record)
        if k in seen:
            continue
        seen.add(k)
        unique.append(record)
    return unique


def reconcile(
    reports: Iterable[Report],
    programs: list[Program],
    customers: list[Customer],
) -> ReconcileResult:
    """Join reports, active programs and customers into per-customer summaries.

    Attaches ``report_link`` to each program in ``programs`` as a side effect
    (None when no report has the expected name).

    Args:
        reports: All reports for the jobs table.
        programs: Active programs, in display order.
        customers: All customers.

    Returns:
        ReconcileResult with summaries for customers having at least one
        program, the unmatched count, and the unmatched programs themselves.
    """
    active_codes = {p.customer_code for p in programs}

    summaries = [
        CustomerSummary(customer_name=c.name, customer_code=c.code)
        for c in customers
        if c.code in active_codes
    ]

    lookup = build_report_lookup(reports)

    for program in programs:
        program.report_link = lookup.get(program.program_key)
    unmatched = find_unmatched_programs(lookup, programs)

    by_code: dict[str | None, list[CustomerSummary]] = {}
    for summary in summaries:
        by_code.setdefault(summary.customer_code, []).append(summary)

    dropped = 0
    for program in programs:
        targets = by_code.get(program.customer_code)
        if not targets:
            dropped += 1
            continue
        for summary in targets:
            summary.add_program(
                ProgramLink(report_name=program.program_key,
                            report_link=program.report_link)
            )

    if dropped:
        logger.debug("%d program(s) reference no known customer code", dropped)
    logger.info(
        "Reconciled %d program(s) across %d customer(s); %d missing report(s)",
        len(programs), len(summaries), len(unmatched),
    )

    return ReconcileResult(
        summaries=summaries,
        unmatched_count=len(unmatched),
        unmatched_programs=unmatched,
    )
