"""
Pipeline package -- reconciliation and menu building for the navigator.

Re-exports key entry points so callers can do::

    from pipeline import reconcile, build_menu, build_diagnostic

The page-load driver lives in ``pipeline.navigation`` (it depends on the
fetcher package and is imported directly).
"""

from pipeline.reconcile import reconcile, find_unmatched_programs, unique_by_key
from pipeline.menu import build_menu, build_diagnostic, sort_summaries, split_by_letter

__all__ = [
    "reconcile",
    "find_unmatched_programs",
    "unique_by_key",
    "build_menu",
    "build_diagnostic",
    "sort_summaries",
    "split_by_letter",
]
