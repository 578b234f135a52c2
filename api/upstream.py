"""
Upstream connection management for the API.

Provides a get_fetcher() dependency that opens a per-request API client,
binds it to a RecordFetcher and closes it after the response is sent, plus
get_navigation(), which runs one full page load.  Configuration is resolved
once by create_app() (or lazily from the environment).

Every request re-fetches; nothing is cached between page loads.
"""

from collections.abc import Generator

from fastapi import Depends

from fetcher.client import QuickbaseClient
from fetcher.records import RecordFetcher
from pipeline.models import NavigationPage
from pipeline.navigation import build_navigation
from utils.config import AppConfig, NavConfig

_CONFIG: AppConfig | None = None


def set_config(cfg: AppConfig) -> None:
    global _CONFIG
    _CONFIG = cfg


def get_config() -> AppConfig:
    """Return the active configuration, loading it from the environment once."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = AppConfig.from_env()
    return _CONFIG


def get_nav_config() -> NavConfig:
    return get_config().nav


def get_fetcher() -> Generator[RecordFetcher, None, None]:
    """FastAPI dependency: yield a RecordFetcher, close its client on exit.

    Usage in a route::

        from api.upstream import get_fetcher
        from fastapi import Depends

        @router.get("/example")
        def example(fetcher=Depends(get_fetcher)):
            ...
    """
    cfg = get_config()
    qb = cfg.quickbase
    client = QuickbaseClient(qb.api_url, headers=qb.headers(),
                             timeout=qb.timeout_seconds)
    try:
        yield RecordFetcher(client, qb, dedupe=cfg.nav.dedupe_records)
    finally:
        client.close()


def get_navigation(
    fetcher: RecordFetcher = Depends(get_fetcher),
    nav: NavConfig = Depends(get_nav_config),
) -> NavigationPage:
    """FastAPI dependency: build the navigation page for this request.

    Raises UpstreamError (handled by the app) when any fetch fails.
    """
    return build_navigation(fetcher, nav)
