"""
Tests for menu and diagnostic builders — pipeline/menu.py

Sorting, letter-range bucketing, static items, masking and the
missing-report lines.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pipeline.menu import (
    build_diagnostic,
    build_menu,
    sort_summaries,
    split_by_letter,
)
from pipeline.models import CustomerSummary, Program, ProgramLink
from utils.config import DEFAULT_BUCKETS


def _summary(name, *programs):
    s = CustomerSummary(customer_name=name, customer_code=name[:2].upper())
    for report_name, link in programs:
        s.add_program(ProgramLink(report_name=report_name, report_link=link))
    return s


class TestSortSummaries:
    def test_sorts_by_name_case_insensitively(self):
        summaries = [_summary("bolt"), _summary("Zed"), _summary("Acme")]
        assert [s.customer_name for s in sort_summaries(summaries)] == ["Acme", "bolt", "Zed"]

    def test_none_name_sorts_first(self):
        summaries = [_summary("Acme"), CustomerSummary(customer_name=None, customer_code="X")]
        assert sort_summaries(summaries)[0].customer_name is None


class TestSplitByLetter:
    def test_inclusive_bounds(self):
        summaries = [_summary("Acme"), _summary("Delta"), _summary("Echo")]
        names = [s.customer_name for s in split_by_letter("A", "D", summaries)]
        assert names == ["Acme", "Delta"]

    def test_digits_range(self):
        summaries = [_summary("3M Partners"), _summary("Acme")]
        assert [s.customer_name for s in split_by_letter("0", "9", summaries)] == ["3M Partners"]

    def test_ordinal_comparison_excludes_lowercase(self):
        assert split_by_letter("A", "Z", [_summary("acme")]) == []

    def test_empty_name_never_matches(self):
        summaries = [CustomerSummary(customer_name="", customer_code="X"),
                     CustomerSummary(customer_name=None, customer_code="Y")]
        assert split_by_letter("\x00", "\uffff", summaries) == []

    def test_preserves_arrival_order(self):
        summaries = [_summary("Delta"), _summary("Acme")]
        names = [s.customer_name for s in split_by_letter("A", "D", summaries)]
        assert names == ["Delta", "Acme"]


class TestBuildMenu:
    def test_one_group_per_range_even_when_empty(self):
        menu = build_menu([_summary("Acme")], DEFAULT_BUCKETS)
        assert [g.label for g in menu.groups] == ["0-9", "A-D", "E-H", "I-L", "M-P", "Q-T", "U-Z"]
        assert [len(g.customers) for g in menu.groups] == [0, 1, 0, 0, 0, 0, 0]

    def test_customer_links(self):
        acme = _summary("Acme", ("Acme 2023", "https://x/1"), ("Acme 2024", None))
        menu = build_menu([acme], [("A", "D")])
        customer = menu.groups[0].customers[0]
        assert customer.label == "Acme"
        assert [(l.label, l.href) for l in customer.links] == [
            ("Acme 2023", "https://x/1"), ("Acme 2024", None)
        ]

    def test_out_of_range_customer_in_no_group(self):
        menu = build_menu([_summary("#hash"), _summary("Acme")], DEFAULT_BUCKETS)
        labels = [c.label for g in menu.groups for c in g.customers]
        assert labels == ["Acme"]

    def test_overlapping_ranges_place_customer_in_each(self):
        menu = build_menu([_summary("Bolt")], [("A", "C"), ("B", "D")])
        assert [len(g.customers) for g in menu.groups] == [1, 1]

    def test_no_ranges_gives_no_groups(self):
        assert build_menu([_summary("Acme")], []).groups == []

    def test_static_items_follow_groups(self):
        static = [
            {"label": "Accounting Reports",
             "children": [{"label": "Aging", "href": "https://x/aging"}]},
            {"label": "Job Map", "href": "https://x/map"},
        ]
        menu = build_menu([], [("A", "D")], static_items=static)
        assert [s.label for s in menu.static_items] == ["Accounting Reports", "Job Map"]
        assert menu.static_items[0].children[0].href == "https://x/aging"
        assert menu.static_items[1].href == "https://x/map"
        assert menu.static_items[1].children == []

    def test_mask_hides_names_not_links(self):
        acme = _summary("O'Neil-Co 7", ("Acme 2023", "https://x/1"))
        menu = build_menu([acme], [("A", "Z")], mask=True)
        customer = menu.groups[0].customers[0]
        assert customer.label == "XXXXXXXXX X"
        assert customer.links[0].label == "XXXX XXXX"
        assert customer.links[0].href == "https://x/1"

    def test_to_dict_shape(self):
        menu = build_menu([_summary("Acme", ("Acme 2023", None))], [("A", "D")])
        d = menu.to_dict()
        assert d["groups"][0]["label"] == "A-D"
        assert d["groups"][0]["customers"][0]["links"][0] == {"label": "Acme 2023", "href": None}
        assert d["static_items"] == []


class TestBuildDiagnostic:
    def test_lines_and_count(self):
        programs = [Program("C1", "Acme 2024"), Program("C9", "Zed 2022")]
        diag = build_diagnostic(programs)
        assert diag.count == 2
        assert diag.missing == [
            "Acme 2024: Make/Edit Report",
            "Zed 2022: Make/Edit Report",
        ]
        assert diag.summary_line == "Number of Missing Reports: 2"

    def test_zero_still_reports_count(self):
        diag = build_diagnostic([])
        assert diag.missing == []
        assert diag.summary_line == "Number of Missing Reports: 0"

    def test_masked_lines(self):
        diag = build_diagnostic([Program("C1", "Acme 2024")], mask=True)
        assert diag.missing == ["XXXX XXXX: Make/Edit Report"]

    def test_to_dict(self):
        d = build_diagnostic([Program("C1", "Acme 2024")]).to_dict()
        assert d == {"missing": ["Acme 2024: Make/Edit Report"], "count": 1,
                     "summary": "Number of Missing Reports: 1"}
