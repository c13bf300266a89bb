"""
Frontend HTML routes.

Serves the Jinja2 page that hosts the chart.

Routes:
    GET /    → index.html (title, chart or error message, tooltip element)

The page embeds the surface markup produced by the renderer and a small
script (static/tooltip.js) that replays the same mouseover / mousemove /
mouseout behaviour in the browser.
"""

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_pipeline
from chart.pipeline import ChartPipeline

router = APIRouter(tags=["frontend"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None


def set_templates(t: Jinja2Templates | None) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised — call set_templates() first")
    return _templates


def _page_context(pipeline: ChartPipeline) -> dict:
    config = pipeline.config
    chart_html = None
    if pipeline.error is None and pipeline.surface.svg is not None:
        chart_html = pipeline.surface.to_html()
    return {
        "title": config.title,
        "error": pipeline.error,
        "chart_html": chart_html,
        "tooltip_html": pipeline.tooltip.to_html(),
        "tooltip_offset_top": config.tooltip_offset_top,
        "tooltip_offset_left": config.tooltip_offset_left,
    }


# ── Routes ────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request, pipeline: ChartPipeline = Depends(get_pipeline)) -> HTMLResponse:
    """Main chart page."""
    return _tmpl().TemplateResponse(
        request,
        "index.html",
        _page_context(pipeline),
    )


# ── Error pages ───────────────────────────────────────────────────────────────

def register_error_handlers(app: FastAPI) -> None:
    """Render HTML error pages for browser routes, JSON for /api paths."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_page(request: Request, exc: StarletteHTTPException):
        if request.url.path.startswith("/api/"):
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.detail, "status_code": exc.status_code},
            )
        return _tmpl().TemplateResponse(
            request,
            "error.html",
            {"status_code": exc.status_code, "detail": exc.detail},
            status_code=exc.status_code,
        )
