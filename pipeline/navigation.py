"""
Navigation page builder — one page load, start to finish.

    fetch reports → fetch programs → fetch customers
        → reconcile → sort + bucket → diagnostic

Any ``UpstreamError`` from a fetch aborts the run before anything is built:
there is no partial page.  Each step is timed and logged through
``RunLogger``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from fetcher.records import RecordFetcher
from pipeline.logging import RunLogger
from pipeline.menu import build_diagnostic, build_menu, sort_summaries
from pipeline.models import FetchedRecords, NavigationPage
from pipeline.reconcile import reconcile
from utils.config import NavConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run_step(run: RunLogger, name: str, fn: Callable[[], T],
              count: Callable[[T], int] = len,
              metrics: Callable[[T], dict] | None = None) -> T:
    report = run.start_step(name)
    try:
        result = fn()
    except Exception as exc:
        run.fail_step(name, exc)
        raise
    report.items_processed = count(result)
    if metrics is not None:
        report.metrics.update(metrics(result))
    run.finish_step(name, report)
    return result


def fetch_records(fetcher: RecordFetcher, nav: NavConfig,
                  run: RunLogger) -> FetchedRecords:
    """Fetch the three record sets, one logged step each (or one combined
    step when fetching concurrently)."""
    if nav.fetch_concurrently:
        return _run_step(
            run, "fetch_records",
            lambda: fetcher.fetch_all(concurrent=True),
            count=lambda r: len(r.reports) + len(r.programs) + len(r.customers),
        )
    return FetchedRecords(
        reports=_run_step(run, "fetch_reports", fetcher.fetch_reports),
        programs=_run_step(run, "fetch_programs", fetcher.fetch_active_programs),
        customers=_run_step(run, "fetch_customers", fetcher.fetch_customers),
    )


def build_navigation(
    fetcher: RecordFetcher,
    nav: NavConfig,
    run: RunLogger | None = None,
) -> NavigationPage:
    """Build the menu and missing-report diagnostic for one page load.

    Args:
        fetcher: Record fetcher bound to an upstream client.
        nav: Bucket ranges, static items and display options.
        run: Step logger; a fresh one is created when omitted.

    Returns:
        NavigationPage with the menu, the diagnostic and the sorted summaries.

    Raises:
        UpstreamError: If any fetch fails.
    """
    run = run or RunLogger()
    records = fetch_records(fetcher, nav, run)

    result = _run_step(
        run, "reconcile",
        lambda: reconcile(records.reports, records.programs, records.customers),
        count=lambda r: len(r.summaries),
        metrics=lambda r: {"unmatched": r.unmatched_count},
    )

    def _present() -> NavigationPage:
        summaries = sort_summaries(result.summaries)
        return NavigationPage(
            menu=build_menu(summaries, nav.buckets, nav.static_items,
                            mask=nav.mask_names),
            diagnostic=build_diagnostic(result.unmatched_programs,
                                        mask=nav.mask_names),
            summaries=summaries,
        )

    page = _run_step(run, "present", _present,
                     count=lambda p: sum(len(g.customers) for g in p.menu.groups))

    if page.diagnostic.count:
        logger.warning("%d active program(s) have no matching report",
                       page.diagnostic.count)
    return page
