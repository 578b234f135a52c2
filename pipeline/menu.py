"""
Navigation menu and missing-report diagnostic builders.

Turns reconciled ``CustomerSummary`` values into declarative presentation
values; rendering them into HTML is the web layer's job.

Menu shape::

    MenuGroup "A-D"                 one per configured (low, high) range
        MenuCustomer "Acme Inc"     customers whose name starts in [low, high]
            MenuLink "Acme 2023"    one per program, href = report link

Customers are sorted by name first, then bucketed; within a group they keep
that order.  A customer whose first character falls in no range is left out
of the menu entirely.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pipeline.models import (
    CustomerSummary,
    MenuCustomer,
    MenuGroup,
    MenuLink,
    MissingReportDiagnostic,
    NavigationMenu,
    Program,
    StaticMenuItem,
)
from utils.strings import mask_name

logger = logging.getLogger(__name__)

MISSING_REPORT_SUFFIX = ": Make/Edit Report"


def _name_sort_key(summary: CustomerSummary) -> str:
    return (summary.customer_name or "").casefold()


def sort_summaries(summaries: Iterable[CustomerSummary]) -> list[CustomerSummary]:
    """Return summaries ordered by customer name, case-insensitively (stable)."""
    return sorted(summaries, key=_name_sort_key)


def split_by_letter(
    low: str,
    high: str,
    summaries: Iterable[CustomerSummary],
) -> list[CustomerSummary]:
    """Select customers whose name's first character lies in [low, high].

    Comparison is by code point, so ``"a"`` does not fall in ``A-Z``.
    Customers with an empty name never match.
    """
    selected = []
    for summary in summaries:
        name = summary.customer_name or ""
        if name and low <= name[0] <= high:
            selected.append(summary)
    return selected


def _menu_customer(summary: CustomerSummary, mask: bool) -> MenuCustomer:
    name = summary.customer_name or ""
    links = [
        MenuLink(
            label=mask_name(p.report_name) if mask else p.report_name,
            href=p.report_link,
        )
        for p in summary.programs
    ]
    return MenuCustomer(
        label=mask_name(name, customer=True) if mask else name,
        links=links,
    )


def _static_item(raw: dict[str, Any]) -> StaticMenuItem:
    children = [
        MenuLink(label=str(c["label"]), href=c.get("href"))
        for c in raw.get("children", [])
    ]
    return StaticMenuItem(label=str(raw["label"]), href=raw.get("href"),
                          children=children)


def build_menu(
    summaries: Sequence[CustomerSummary],
    ranges: Sequence[tuple[str, str]],
    static_items: Iterable[dict[str, Any]] = (),
    mask: bool = False,
) -> NavigationMenu:
    """Bucket customers into one dropdown group per configured range.

    Args:
        summaries: Reconciled summaries, already sorted by customer name.
        ranges: Ordered (low, high) pairs; every range yields a group, even
            an empty one.
        static_items: Configured non-program navbar entries, appended after
            the groups.
        mask: Mask customer and program names (links are left intact).

    Returns:
        NavigationMenu for the rendering layer.
    """
    groups: list[MenuGroup] = []
    placed: set[int] = set()
    for low, high in ranges:
        members = split_by_letter(low, high, summaries)
        placed.update(id(m) for m in members)
        groups.append(MenuGroup(
            low=low,
            high=high,
            customers=[_menu_customer(m, mask) for m in members],
        ))

    omitted = sum(1 for s in summaries if id(s) not in placed)
    if omitted:
        logger.warning(
            "%d customer(s) fall outside every configured menu range", omitted
        )

    return NavigationMenu(
        groups=groups,
        static_items=[_static_item(item) for item in static_items],
    )


def build_diagnostic(
    unmatched_programs: Iterable[Program],
    mask: bool = False,
) -> MissingReportDiagnostic:
    """List each program that still needs a report, in program order."""
    missing = []
    for program in unmatched_programs:
        name = mask_name(program.program_key) if mask else program.program_key
        missing.append(f"{name}{MISSING_REPORT_SUFFIX}")
    return MissingReportDiagnostic(missing=missing, count=len(missing))
