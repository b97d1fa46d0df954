from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptlab import __version__
from promptlab.base.errors import PromptRejected
from promptlab.base.logging import get_logger, log_event
from promptlab.config import get_settings

from .app_parts.app_core import build_platforms_response

logger = get_logger("promptlab.service")

app = FastAPI(title="promptlab", version=__version__)


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


@app.exception_handler(PromptRejected)
async def _prompt_rejected_handler(request: Request, exc: PromptRejected) -> JSONResponse:
    """Render client input errors as ``{"error": message}``.

    These are refused before any provider adapter exists, so no request
    log entry is written for them.
    """
    log_event(
        logger,
        "request.rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


# ---------------------------------------------------------------------------
# Health and platform endpoints
# ---------------------------------------------------------------------------


@app.get("/api/health")
def health() -> Dict[str, Any]:
    """Check the health status of the service."""
    return {"ok": True}


@app.get("/api/platforms")
def get_platforms() -> Dict[str, Any]:
    """List the platform registry and whether each platform has a credential."""
    return build_platforms_response()


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def get_app() -> FastAPI:
    """Return the FastAPI application instance with every route registered."""
    return app


# Route modules register themselves on ``app``.
from . import chat_stream, log_batch  # noqa: E402,F401
