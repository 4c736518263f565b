# lectern/main.py
import hashlib
import os
import time
from datetime import datetime

import markdown2
import structlog
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware

# ---- Config (loads .env) + logging ----
from lectern.config import ASSETS_BASE_URL, LOG_JSON, LOG_LEVEL, SECRET_KEY
from lectern.logging import configure_logging

configure_logging(LOG_LEVEL, json_output=LOG_JSON)
logger = structlog.get_logger()

# ---- Routers ----
from lectern.routers import search as search_router  # noqa: E402
from lectern.routers.admin.router import router as admin_router  # noqa: E402

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
STATIC_DIR = os.path.join(BASE_DIR, "static")
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

app = FastAPI(title="Lectern")

# =============================================================================
# Middleware
# =============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One `http_request` log line per request (static assets skipped)."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith("/static/"):
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response


# Order matters: sessions must wrap everything that reads request.session
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)
app.add_middleware(GZipMiddleware, minimum_size=500)

# =============================================================================
# Static & Templates
# =============================================================================
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
templates = Jinja2Templates(directory=TEMPLATES_DIR)
app.state.templates = templates

# ---- Jinja helpers ----

def asset(key: str) -> str:
    """Build a full asset URL (absolute kept; otherwise ASSETS_BASE_URL or /static)."""
    if not key:
        return ""
    k = key.strip()
    if k.startswith("http://") or k.startswith("https://"):
        return k
    return f"{ASSETS_BASE_URL}/{k.lstrip('/')}" if ASSETS_BASE_URL else f"/static/{k.lstrip('/')}"


templates.env.globals["asset"] = asset


def md_filter(text: str) -> str:
    """Markdown → HTML for post text (basic extras)."""
    if not text:
        return ""
    return markdown2.markdown(text, extras=["fenced-code-blocks", "tables", "strike", "smarty"])


templates.env.filters["md"] = md_filter


def pop_flash(request: Request):
    """One-shot success/failure message set by admin actions before a redirect."""
    return request.session.pop("flash", None)


templates.env.globals["pop_flash"] = pop_flash
templates.env.globals["now"] = lambda: datetime.now()


# ---- CSS cache-busting ----
def _static_file_version(path: str) -> str:
    try:
        with open(path, "rb") as f:
            return hashlib.sha1(f.read()).hexdigest()[:10]
    except OSError:
        return "dev"


STATIC_VERSION = _static_file_version(os.path.join(STATIC_DIR, "css", "site.css"))
templates.env.globals["STATIC_VERSION"] = STATIC_VERSION

# =============================================================================
# Routes
# =============================================================================
app.include_router(search_router.router)
app.include_router(admin_router)
