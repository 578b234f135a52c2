"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 8000
    QB_REALM=example.quickbase.com QB_USER_TOKEN=... python -m api.app

Serves the navigation page at ``/`` and its data as JSON under
``/api/v1/navigation``.  OpenAPI docs at http://localhost:8000/docs.

Logging: one stream handler on the root logger; newline-delimited JSON when
APP_LOG_FORMAT=json, plain text otherwise.  Each request is logged with
method, path, status, duration and a short request id.
"""

import json
import logging
import time
import uuid
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from api import upstream
from api.routes import navigation
from api.routes import frontend as frontend_routes
from utils.config import AppConfig

_logger = logging.getLogger("report_nav_api")


# ── Structured JSON logging ──────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(cfg: AppConfig) -> None:
    """Install the root stream handler in text or JSON format."""
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler],
                        level=getattr(logging, cfg.log_level, logging.INFO),
                        force=True)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Override the configuration (useful for testing); defaults to
            ``AppConfig.from_env()``.

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or AppConfig.from_env()
    upstream.set_config(cfg)
    configure_logging(cfg)

    app = FastAPI(
        title="Program Report Navigator",
        summary="Navigation menu and missing-report check for active programs.",
        description=(
            "Cross-references active programs with their reports by the naming "
            "convention `<program name> <year>` and groups customers into "
            "letter-range menus.\n\n"
            "Every request re-reads the upstream database; upstream failures "
            "return `502`."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "navigation",
                "description": "Menu groups, customer summaries and missing reports.",
            },
            {
                "name": "meta",
                "description": "Health check.",
            },
        ],
    )

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and tag the response with a request id."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, path, response.status_code, duration_ms,
                request_id,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("unhandled error path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "status_code": 500,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "detail": str(exc), "status_code": 400},
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 OK and whether the upstream tables are configured.

        Does not call the upstream API.
        """
        qb = cfg.quickbase
        tables = {
            "reports": bool(qb.reports_table_id),
            "programs": bool(qb.programs_table_id),
            "customers": bool(qb.customers_table_id),
        }
        return {
            "status": "ok" if all(tables.values()) else "unconfigured",
            "api_url": qb.api_url,
            "tables_configured": tables,
            "buckets": [f"{lo}-{hi}" for lo, hi in cfg.nav.buckets],
        }

    # ── Register routers ──────────────────────────────────────────────────────

    app.include_router(navigation.router, prefix="/api/v1")

    # ── Static files + Jinja2 templates ───────────────────────────────────────
    _here = Path(__file__).parent.parent  # project root

    static_dir = _here / "static"
    templates_dir = _here / "templates"

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    if templates_dir.exists():
        templates = Jinja2Templates(directory=str(templates_dir))
        frontend_routes.set_templates(templates)
        app.include_router(frontend_routes.router)

    frontend_routes.register_error_handlers(app)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    _cfg = upstream.get_config()
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
