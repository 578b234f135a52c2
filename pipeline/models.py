"""
Record and result types for the navigation pipeline.

Records come from the fetcher as flat dataclasses; the reconciler builds
``CustomerSummary`` values from them and the presenter turns those into a
``NavigationMenu`` plus a ``MissingReportDiagnostic``.  Nothing here is
persisted; every value is rebuilt on each page load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ── Fetched records ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Report:
    """A named, linkable report in the upstream system."""

    name: str | None
    id: str | None
    link: str


@dataclass
class Program:
    """An active program; ``program_key`` is ``"<name> <year>"``.

    ``report_link`` stays None until the reconciler finds a report whose name
    equals ``program_key``.
    """

    customer_code: str | None
    program_key: str
    report_link: str | None = None


@dataclass(frozen=True)
class Customer:
    name: str | None
    code: str | None


@dataclass
class FetchedRecords:
    """The three record sets for one run."""

    reports: list[Report] = field(default_factory=list)
    programs: list[Program] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)


# ── Reconciliation results ────────────────────────────────────────────────────


@dataclass
class ProgramLink:
    report_name: str
    report_link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"report_name": self.report_name, "report_link": self.report_link}


@dataclass
class CustomerSummary:
    """One customer with at least one active program."""

    customer_name: str | None
    customer_code: str | None
    programs: list[ProgramLink] = field(default_factory=list)
    program_count: int = 0

    def add_program(self, link: ProgramLink) -> None:
        self.programs.append(link)
        self.program_count = len(self.programs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "customer_code": self.customer_code,
            "programs": [p.to_dict() for p in self.programs],
            "program_count": self.program_count,
        }


@dataclass
class ReconcileResult:
    summaries: list[CustomerSummary]
    unmatched_count: int
    unmatched_programs: list[Program] = field(default_factory=list)


# ── Presentation values ───────────────────────────────────────────────────────


@dataclass
class MenuLink:
    label: str
    href: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "href": self.href}


@dataclass
class MenuCustomer:
    label: str
    links: list[MenuLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "links": [l.to_dict() for l in self.links]}


@dataclass
class MenuGroup:
    """One navbar dropdown covering customers whose names start in [low, high]."""

    low: str
    high: str
    customers: list[MenuCustomer] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.low}-{self.high}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "low": self.low,
            "high": self.high,
            "customers": [c.to_dict() for c in self.customers],
        }


@dataclass
class StaticMenuItem:
    """A configured navbar entry that is not derived from program data."""

    label: str
    href: str | None = None
    children: list[MenuLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "href": self.href,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class NavigationMenu:
    groups: list[MenuGroup] = field(default_factory=list)
    static_items: list[StaticMenuItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "static_items": [s.to_dict() for s in self.static_items],
        }


@dataclass
class MissingReportDiagnostic:
    """Lines naming each program without a report, then the total."""

    missing: list[str] = field(default_factory=list)
    count: int = 0

    @property
    def summary_line(self) -> str:
        return f"Number of Missing Reports: {self.count}"

    def to_dict(self) -> dict[str, Any]:
        return {"missing": list(self.missing), "count": self.count,
                "summary": self.summary_line}


@dataclass
class NavigationPage:
    """Everything one page load renders."""

    menu: NavigationMenu
    diagnostic: MissingReportDiagnostic
    summaries: list[CustomerSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "menu": self.menu.to_dict(),
            "diagnostic": self.diagnostic.to_dict(),
            "summaries": [s.to_dict() for s in self.summaries],
        }
