"""
Frontend HTML routes.

Serves the Jinja2 page that carries the navbar and the missing-report block.

Routes:
    GET /    → index.html (navbar dropdowns + "missing" diagnostic)

When the upstream API fails the same template renders with no menu and no
diagnostic, and the response status is 502.
"""

import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from api.upstream import get_navigation
from fetcher.errors import UpstreamError
from pipeline.models import NavigationPage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["frontend"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised — call set_templates() first")
    return _templates


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request, page: NavigationPage = Depends(get_navigation)) -> HTMLResponse:
    """Home page with the program navbar and missing-report list."""
    return _tmpl().TemplateResponse(
        request,
        "index.html",
        {"menu": page.menu, "diagnostic": page.diagnostic, "error": None},
    )


# ── Error handling ────────────────────────────────────────────────────────────

def register_error_handlers(app: FastAPI) -> None:
    """Render upstream failures as an empty page (HTML) or a 502 body (JSON)."""

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        logger.error("upstream failure path=%s: %s", request.url.path, exc)
        if request.url.path.startswith("/api/") or _templates is None:
            return JSONResponse(
                status_code=502,
                content={**exc.to_dict(), "status_code": 502},
            )
        return _tmpl().TemplateResponse(
            request,
            "index.html",
            {"menu": None, "diagnostic": None,
             "error": "Program reports are unavailable right now."},
            status_code=502,
        )
