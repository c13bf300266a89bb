"""
FastAPI application factory.

Usage:
    python -m api.app                    # Dev server on port 8000
    GDP_DATA_URL=http://localhost:9000/GDP-data.json python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The app owns one ChartPipeline.  Startup (the lifespan hook) runs the single
fetch + draw when APP_PRELOAD is on; otherwise the first request does.

Structured JSON logging when APP_LOG_FORMAT=json.
"""

import asyncio
import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from api.routes import chart as chart_routes
from api.routes import frontend as frontend_routes
from chart.dataset import ChartDataError
from chart.loader import DataLoader
from chart.pipeline import ChartPipeline
from utils.config import AppConfig
from utils.http import RetryStrategy, SessionManager

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


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


_logger = logging.getLogger("gdp_chart_api")
_handler = logging.StreamHandler()
if _cfg.log_format == "json":
    _handler.setFormatter(_JsonFormatter())
else:
    _handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
logging.basicConfig(handlers=[_handler], level=logging.INFO, force=True)


def build_pipeline(cfg: AppConfig) -> tuple[ChartPipeline, SessionManager]:
    """Wire the loader, its HTTP session and the renderer settings."""
    sessions = SessionManager(retry_strategy=RetryStrategy(max_retries=cfg.fetch_retries))
    loader = DataLoader(
        url=cfg.data_url,
        session=sessions.session,
        timeout=cfg.fetch_timeout,
    )
    return ChartPipeline(loader, cfg.chart_config()), sessions


def create_app(
    config: AppConfig | None = None,
    pipeline: ChartPipeline | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Override the environment-derived settings.
        pipeline: Use a prebuilt pipeline (useful for testing with a fake
            HTTP session).

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or _cfg
    sessions: SessionManager | None = None
    if pipeline is None:
        pipeline, sessions = build_pipeline(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run the one-shot fetch on startup; release the HTTP session on exit."""
        if cfg.preload:
            await asyncio.to_thread(app.state.pipeline.run)
        yield
        if sessions is not None:
            sessions.close()

    app = FastAPI(
        title="US GDP Bar Chart",
        summary="Quarterly United States GDP rendered as an SVG bar chart.",
        description=(
            "## US GDP Bar Chart\n\n"
            "Fetches the public GDP dataset once, draws one bar per quarter "
            "and serves the page, the SVG and the decoded data.\n\n"
            "- **Values** are in **billions of US dollars**.\n"
            "- **Dates** are the first day of each quarter (`YYYY-MM-DD`).\n"
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "chart", "description": "Rendered chart, decoded dataset and pipeline status."},
            {"name": "meta", "description": "Health check."},
        ],
    )
    app.state.pipeline = pipeline
    app.state.config = cfg

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and tag the response with a request ID."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, request.url.path, response.status_code,
                duration_ms, request_id,
            )
        return response

    # ── Content Security Policy + security headers ────────────────────────────

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        """Add Content-Security-Policy, X-Content-Type-Options, and X-Frame-Options."""
        response = await call_next(request)
        # Inline style attributes carry the tooltip position.
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(ChartDataError)
    async def chart_data_error_handler(request: Request, exc: ChartDataError):
        return JSONResponse(
            status_code=503,
            content={
                "error": "GDP data unavailable",
                "detail": str(exc),
                "status_code": 503,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad request", "detail": str(exc), "status_code": 400},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "status_code": 500,
            },
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 while the server is up; reports the pipeline state."""
        return {"status": "ok", "pipeline": app.state.pipeline.state.value}

    # ── Register routers ──────────────────────────────────────────────────────

    app.include_router(chart_routes.router, prefix="/api/v1")

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
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
