"""
Navigation JSON routes.

    GET /api/v1/navigation          → menu + diagnostic + summaries
    GET /api/v1/navigation/menu     → menu only
    GET /api/v1/navigation/missing  → missing-report diagnostic only

Each request performs a full page load against the upstream API.  Upstream
failures surface as 502 via the app's UpstreamError handler.
"""

from fastapi import APIRouter, Depends

from api.models import DiagnosticOut, ErrorOut, NavigationMenuOut, NavigationOut
from api.upstream import get_navigation
from pipeline.models import NavigationPage

router = APIRouter(prefix="/navigation", tags=["navigation"])

_ERRORS = {502: {"model": ErrorOut, "description": "Upstream API failure"}}


@router.get("", response_model=NavigationOut, responses=_ERRORS,
            summary="Full navigation page")
def navigation(page: NavigationPage = Depends(get_navigation)) -> dict:
    return page.to_dict()


@router.get("/menu", response_model=NavigationMenuOut, responses=_ERRORS,
            summary="Navigation menu")
def menu(page: NavigationPage = Depends(get_navigation)) -> dict:
    """Letter-range groups of customers, each with its program report links."""
    return page.menu.to_dict()


@router.get("/missing", response_model=DiagnosticOut, responses=_ERRORS,
            summary="Missing-report diagnostic")
def missing(page: NavigationPage = Depends(get_navigation)) -> dict:
    """Active programs with no report named ``"<program name> <year>"``."""
    return page.diagnostic.to_dict()
